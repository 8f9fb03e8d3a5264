"""Scoring rules for completion records.

Presentation helpers only: leaderboards order by hints and time, never by score.
"""
import math

from puzzlebase.domain.enums import Difficulty


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative inputs (builtin round() is banker's)."""
    return int(math.floor(value + 0.5))


class ScoringRules:
    """Point calculation constants and logic."""

    BASE_HINT_SCORE = 100
    PENALTY_PER_HINT = 5
    TIME_BONUS_RATE = 0.1
    DEFAULT_BASE_TIME = 300
    DEFAULT_MULTIPLIER = 1.0

    DIFFICULTY_MULTIPLIERS = {
        Difficulty.EASY: 1.0,
        Difficulty.MEDIUM: 1.5,
        Difficulty.HARD: 2.0,
        Difficulty.EXPERT: 3.0,
    }

    @staticmethod
    def difficulty_multiplier(difficulty: str) -> float:
        tier = Difficulty.lookup(difficulty)
        if tier is None:
            return ScoringRules.DEFAULT_MULTIPLIER
        return ScoringRules.DIFFICULTY_MULTIPLIERS[tier]

    @staticmethod
    def hint_score(hint_count: int, difficulty: str) -> float:
        base = max(0, ScoringRules.BASE_HINT_SCORE - ScoringRules.PENALTY_PER_HINT * hint_count)
        return base * ScoringRules.difficulty_multiplier(difficulty)

    @staticmethod
    def time_score(time_taken: int, base_time: int = DEFAULT_BASE_TIME) -> int:
        if time_taken >= base_time:
            return 0
        return max(0, round_half_up(ScoringRules.TIME_BONUS_RATE * (base_time - time_taken)))

    @staticmethod
    def total_score(
        hint_count: int,
        time_taken: int,
        difficulty: str,
        base_time: int = DEFAULT_BASE_TIME,
    ) -> float:
        return (
            ScoringRules.hint_score(hint_count, difficulty)
            + ScoringRules.time_score(time_taken, base_time)
        )
