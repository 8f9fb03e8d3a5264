"""Per-account best-record resolution."""
from dataclasses import dataclass, field
from typing import Sequence

from puzzlebase.domain.record import CompletionRecord


@dataclass
class BestRecordSet:
    best_time: CompletionRecord | None = None
    fewest_hints: CompletionRecord | None = None
    best_by_type: dict = field(default_factory=dict)
    best_by_difficulty: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "best_time": self.best_time.to_dict() if self.best_time else None,
            "fewest_hints": self.fewest_hints.to_dict() if self.fewest_hints else None,
            "best_by_type": {k: r.to_dict() for k, r in self.best_by_type.items()},
            "best_by_difficulty": {k: r.to_dict() for k, r in self.best_by_difficulty.items()},
        }


def _keep_better(best: dict, key: str, record: CompletionRecord) -> None:
    current = best.get(key)
    if current is None or record.canonical_key < current.canonical_key:
        best[key] = record


def resolve_best_records(records: Sequence[CompletionRecord]) -> BestRecordSet:
    """
    Pick the account's best records from `records` in store insertion order.

    best_time takes the first record with the minimum time_taken; equal times
    are not broken any further. Everything else uses the canonical
    (hint_count, time_taken) order, earliest record winning exact ties.
    """
    result = BestRecordSet()
    if not records:
        return result

    result.best_time = min(records, key=lambda r: r.time_taken)
    result.fewest_hints = min(records, key=lambda r: r.canonical_key)
    for record in records:
        _keep_better(result.best_by_type, record.puzzle_type, record)
        _keep_better(result.best_by_difficulty, record.difficulty, record)
    return result
