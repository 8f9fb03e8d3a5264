"""Descriptive statistics over a set of completion records."""
from dataclasses import dataclass, field
from typing import Iterable

from puzzlebase.domain.record import CompletionRecord
from puzzlebase.domain.scoring import round_half_up


@dataclass
class GroupStats:
    count: int = 0
    best_time: int = 0
    total_hints: int = 0

    def add(self, record: CompletionRecord) -> None:
        if self.count == 0 or record.time_taken < self.best_time:
            self.best_time = record.time_taken
        self.count += 1
        self.total_hints += record.hint_count

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "best_time": self.best_time,
            "total_hints": self.total_hints,
        }


@dataclass
class StatsSummary:
    total_puzzles: int = 0
    total_time: int = 0
    average_time: int = 0
    best_time: int = 0
    total_hints: int = 0
    average_hints: int = 0
    by_type: dict = field(default_factory=dict)
    by_difficulty: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total_puzzles": self.total_puzzles,
            "total_time": self.total_time,
            "average_time": self.average_time,
            "best_time": self.best_time,
            "total_hints": self.total_hints,
            "average_hints": self.average_hints,
            "by_type": {k: v.to_dict() for k, v in sorted(self.by_type.items())},
            "by_difficulty": {k: v.to_dict() for k, v in sorted(self.by_difficulty.items())},
        }


def summarize(records: Iterable[CompletionRecord]) -> StatsSummary:
    """
    Count, totals, averages and minima, overall and grouped by puzzle_type
    and by difficulty (exact string keys). Only sum/count/min are used, so
    the result does not depend on input order. Empty input is all zeros.
    """
    summary = StatsSummary()
    for record in records:
        if summary.total_puzzles == 0 or record.time_taken < summary.best_time:
            summary.best_time = record.time_taken
        summary.total_puzzles += 1
        summary.total_time += record.time_taken
        summary.total_hints += record.hint_count
        summary.by_type.setdefault(record.puzzle_type, GroupStats()).add(record)
        summary.by_difficulty.setdefault(record.difficulty, GroupStats()).add(record)

    if summary.total_puzzles:
        summary.average_time = round_half_up(summary.total_time / summary.total_puzzles)
        summary.average_hints = round_half_up(summary.total_hints / summary.total_puzzles)
    return summary
