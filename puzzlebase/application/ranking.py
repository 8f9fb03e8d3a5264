"""Competitive ordering: global leaderboards and personal standings.

Canonical order is ascending hint_count, then ascending time_taken. Ranks are
the 1-based position in that order, so records tied on both keys still get
distinct consecutive ranks. Nothing is cached; every call reads the store.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List

from puzzlebase.domain.record import CANONICAL_ORDER, CompletionRecord, RecordQuery

PERSONAL_RANKING_SCAN_LIMIT = 10000


@dataclass(frozen=True)
class RankingEntry:
    rank: int
    account_id: str
    hint_count: int
    time_taken: int
    completed_at: datetime

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "account_id": self.account_id,
            "hint_count": self.hint_count,
            "time_taken": self.time_taken,
            "completed_at": self.completed_at.isoformat(),
        }


@dataclass(frozen=True)
class PersonalRankingResult:
    rank: int | None
    total_participants: int
    personal_best: CompletionRecord | None

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "total_participants": self.total_participants,
            "personal_best": self.personal_best.to_dict() if self.personal_best else None,
        }


def build_ranking(records: Iterable[CompletionRecord], limit: int | None = None) -> List[RankingEntry]:
    """Stable-sort into canonical order, cut at `limit`, number from 1."""
    ordered = sorted(records, key=lambda r: r.canonical_key)
    if limit is not None:
        ordered = ordered[:limit]
    return [
        RankingEntry(
            rank=i + 1,
            account_id=r.account_id,
            hint_count=r.hint_count,
            time_taken=r.time_taken,
            completed_at=r.completed_at,
        )
        for i, r in enumerate(ordered)
    ]


def global_ranking(
    store,
    puzzle_type: str,
    difficulty: str | None = None,
    limit: int | None = None,
) -> List[RankingEntry]:
    """
    Leaderboard for one puzzle type, optionally one difficulty. Omitting the
    difficulty ranks across all of them. One entry per record; the same
    account may appear several times. `limit` is applied as given.
    """
    query = RecordQuery(
        puzzle_type=puzzle_type,
        difficulty=difficulty,
        order_by=CANONICAL_ORDER,
        limit=limit,
    )
    return build_ranking(store.find(query), limit)


def personal_best(
    store,
    account_id: str,
    puzzle_type: str,
    difficulty: str | None = None,
) -> CompletionRecord | None:
    rows = store.find(RecordQuery(
        account_id=account_id,
        puzzle_type=puzzle_type,
        difficulty=difficulty,
        order_by=CANONICAL_ORDER,
        limit=1,
    ))
    return rows[0] if rows else None


def personal_ranking(
    store,
    account_id: str,
    puzzle_type: str,
    difficulty: str | None = None,
    scan_limit: int = PERSONAL_RANKING_SCAN_LIMIT,
) -> PersonalRankingResult:
    """
    Position of `account_id` within the global ranking.

    The ranking is materialized up to `scan_limit` entries and scanned
    linearly; rank is that of the account's first entry found. When more
    records exist than `scan_limit`, both rank and total_participants
    (a record count, not an account count) undercount.
    """
    entries = global_ranking(store, puzzle_type, difficulty, scan_limit)
    rank = next((e.rank for e in entries if e.account_id == account_id), None)
    return PersonalRankingResult(
        rank=rank,
        total_participants=len(entries),
        personal_best=personal_best(store, account_id, puzzle_type, difficulty),
    )
