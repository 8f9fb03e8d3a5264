"""Enums and value objects used across the domain."""
from enum import Enum


class RecordField(str, Enum):
    """Record columns a store query may order by."""

    RECORD_ID = "record_id"
    COMPLETED_AT = "completed_at"
    HINT_COUNT = "hint_count"
    TIME_TAKEN = "time_taken"

    @staticmethod
    def sortable() -> list:
        """Fields exposed to callers through `sort_by`."""
        return [
            RecordField.COMPLETED_AT,
            RecordField.HINT_COUNT,
            RecordField.TIME_TAKEN,
        ]


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @property
    def descending(self) -> bool:
        return self is SortOrder.DESC


class Difficulty(str, Enum):
    """Known difficulty tiers. Records may carry any other label too."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def lookup(cls, label: str) -> "Difficulty | None":
        """Case-insensitive match; None for labels outside the known tiers."""
        try:
            return cls(label.strip().lower())
        except ValueError:
            return None
