"""Bounds for ranged, bucketed and paged record queries.

Every clamp here keeps a single query proportional to a capped number of
records. Out-of-range ranges and thresholds raise; counts and page sizes
are clamped silently.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List

from puzzlebase.domain.enums import RecordField, SortOrder
from puzzlebase.domain.errors import ValidationError
from puzzlebase.domain.record import CompletionRecord, as_utc
from puzzlebase.domain.scoring import round_half_up

MAX_RANGE_DAYS = 365
DEFAULT_DAILY_DAYS = 30
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
DEFAULT_RANKING_LIMIT = 100
MAX_RANKING_LIMIT = 1000


def _clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


@dataclass(frozen=True)
class Page:
    page: int
    limit: int
    offset: int


@dataclass(frozen=True)
class DailyStat:
    date: str
    count: int
    total_time: int
    avg_hints: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "count": self.count,
            "total_time": self.total_time,
            "avg_hints": self.avg_hints,
        }


def validate_date_range(start: datetime, end: datetime) -> tuple:
    """Raises unless start <= end and the span is at most 365 days."""
    start, end = as_utc(start), as_utc(end)
    if start > end:
        raise ValidationError("start_date must not be after end_date.")
    if end - start > timedelta(days=MAX_RANGE_DAYS):
        raise ValidationError(f"Date range cannot exceed {MAX_RANGE_DAYS} days.")
    return start, end


def clamp_days(days: int | None) -> int:
    if days is None:
        return DEFAULT_DAILY_DAYS
    return _clamp(days, 1, MAX_RANGE_DAYS)


def daily_window_start(days: int, now: datetime) -> datetime:
    return as_utc(now) - timedelta(days=days)


def daily_buckets(records: Iterable[CompletionRecord]) -> List[DailyStat]:
    """One entry per UTC calendar day that has records, newest day first."""
    buckets: dict = {}
    for record in records:
        day = record.completed_at.date().isoformat()
        count, total_time, total_hints = buckets.get(day, (0, 0, 0))
        buckets[day] = (count + 1, total_time + record.time_taken, total_hints + record.hint_count)

    return [
        DailyStat(
            date=day,
            count=count,
            total_time=total_time,
            avg_hints=round_half_up(total_hints / count),
        )
        for day, (count, total_time, total_hints) in sorted(buckets.items(), reverse=True)
    ]


def paginate(
    page: int | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> Page:
    """
    Clamp limit to [1, 100] and page to >= 1. A bare offset is converted
    to the page that contains it.
    """
    limit = _clamp(limit if limit is not None else DEFAULT_PAGE_LIMIT, 1, MAX_PAGE_LIMIT)
    if page is None:
        page = (max(0, offset or 0) // limit) + 1
    page = max(1, page)
    return Page(page=page, limit=limit, offset=(page - 1) * limit)


def clamp_recent_limit(limit: int | None) -> int:
    return _clamp(limit if limit is not None else DEFAULT_PAGE_LIMIT, 1, MAX_PAGE_LIMIT)


def clamp_ranking_limit(limit: int | None) -> int:
    return _clamp(limit if limit is not None else DEFAULT_RANKING_LIMIT, 1, MAX_RANKING_LIMIT)


def require_max_hints(max_hints: int) -> int:
    if max_hints is None or max_hints < 0:
        raise ValidationError("max_hints must be 0 or greater.")
    return max_hints


def require_max_time(max_time: int) -> int:
    if max_time is None or max_time <= 0:
        raise ValidationError("max_time must be greater than 0.")
    return max_time


def parse_sort(sort_by: str | None = None, sort_order: str | None = None) -> tuple:
    """Map caller sort parameters to an order_by tuple for RecordQuery."""
    try:
        field = RecordField(sort_by or RecordField.COMPLETED_AT.value)
    except ValueError:
        field = None
    if field not in RecordField.sortable():
        allowed = ", ".join(f.value for f in RecordField.sortable())
        raise ValidationError(f"sort_by must be one of: {allowed}.")

    try:
        order = SortOrder((sort_order or SortOrder.DESC.value).upper())
    except ValueError:
        raise ValidationError("sort_order must be ASC or DESC.") from None

    return ((field, order.descending), (RecordField.RECORD_ID, order.descending))
