"""Completion record entity and the store query value object."""
from dataclasses import dataclass, field
from datetime import datetime, timezone

from puzzlebase.domain.enums import RecordField
from puzzlebase.domain.scoring import ScoringRules


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class CompletionCandidate:
    """A completion submission that has not been persisted yet."""

    account_id: str
    puzzle_type: str
    difficulty: str
    time_taken: int
    hint_count: int
    completed_at: datetime | None = None


@dataclass(frozen=True)
class CompletionRecord:
    """
    One puzzle-solve event. Immutable: created once by the store,
    never updated, only deleted.
    """

    record_id: int
    account_id: str
    puzzle_type: str
    difficulty: str
    time_taken: int
    hint_count: int
    completed_at: datetime

    @property
    def canonical_key(self) -> tuple:
        """Fewer hints first, then faster."""
        return (self.hint_count, self.time_taken)

    def score(self, base_time: int = 300) -> dict:
        hint = ScoringRules.hint_score(self.hint_count, self.difficulty)
        time = ScoringRules.time_score(self.time_taken, base_time)
        return {"hint_score": hint, "time_score": time, "total_score": hint + time}

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "account_id": self.account_id,
            "puzzle_type": self.puzzle_type,
            "difficulty": self.difficulty,
            "time_taken": self.time_taken,
            "hint_count": self.hint_count,
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletionRecord":
        completed_at = data["completed_at"]
        if isinstance(completed_at, str):
            completed_at = datetime.fromisoformat(completed_at)
        return cls(
            record_id=int(data["record_id"]),
            account_id=data["account_id"],
            puzzle_type=data["puzzle_type"],
            difficulty=data["difficulty"],
            time_taken=int(data["time_taken"]),
            hint_count=int(data["hint_count"]),
            completed_at=as_utc(completed_at),
        )


NATURAL_ORDER = ((RecordField.RECORD_ID, False),)
CANONICAL_ORDER = (
    (RecordField.HINT_COUNT, False),
    (RecordField.TIME_TAKEN, False),
    (RecordField.RECORD_ID, False),
)


@dataclass(frozen=True)
class RecordQuery:
    """
    Filter/sort/limit query issued against a record store.

    Date bounds are inclusive. `order_by` is a sequence of
    (RecordField, descending) pairs; the default is insertion order.
    """

    account_id: str | None = None
    puzzle_type: str | None = None
    difficulty: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    max_hints: int | None = None
    max_time: int | None = None
    order_by: tuple = field(default=NATURAL_ORDER)
    limit: int | None = None
    offset: int = 0

    def matches(self, record: CompletionRecord) -> bool:
        if self.account_id is not None and record.account_id != self.account_id:
            return False
        if self.puzzle_type is not None and record.puzzle_type != self.puzzle_type:
            return False
        if self.difficulty is not None and record.difficulty != self.difficulty:
            return False
        if self.date_from is not None and record.completed_at < as_utc(self.date_from):
            return False
        if self.date_to is not None and record.completed_at > as_utc(self.date_to):
            return False
        if self.max_hints is not None and record.hint_count > self.max_hints:
            return False
        if self.max_time is not None and record.time_taken > self.max_time:
            return False
        return True
