"""Puzzle record use cases -- submit, list, stats, best records, rankings, delete."""
import functools
import logging
from datetime import datetime, timezone

from puzzlebase.application.aggregator import summarize
from puzzlebase.application.best_records import resolve_best_records
from puzzlebase.application.ranking import (
    PERSONAL_RANKING_SCAN_LIMIT,
    global_ranking,
    personal_ranking,
)
from puzzlebase.application.windowing import (
    clamp_days,
    clamp_ranking_limit,
    clamp_recent_limit,
    daily_buckets,
    daily_window_start,
    paginate,
    parse_sort,
    require_max_hints,
    require_max_time,
    validate_date_range,
)
from puzzlebase.domain.enums import RecordField
from puzzlebase.domain.errors import NotFoundError, OwnershipError, StoreError, ValidationError
from puzzlebase.domain.invariant import validate_account_id, validate_completion
from puzzlebase.domain.record import CompletionCandidate, RecordQuery

log = logging.getLogger("puzzlebase.records")


def _log_store_failures(method):
    """Log store failures with the operation name, then re-raise unchanged."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except StoreError as exc:
            log.error("%s failed: %s", method.__name__, exc)
            raise

    return wrapper


class RecordService:
    """
    Read-mostly facade over a record store.

    Stateless: every query recomputes from the store, so results reflect
    whatever the store has committed at call time.
    """

    def __init__(self, record_repo, account_repo=None,
                 scan_limit: int = PERSONAL_RANKING_SCAN_LIMIT):
        self._records = record_repo
        self._accounts = account_repo
        self._scan_limit = scan_limit

    def _require_account(self, account_id: str) -> None:
        if self._accounts is not None and not self._accounts.exists(account_id):
            raise NotFoundError(f"Account {account_id} not found.")

    # -- writes ----------------------------------------------------------

    @_log_store_failures
    def add_completion(
        self,
        account_id: str,
        puzzle_type: str,
        difficulty: str,
        time_taken: int,
        hint_count: int,
        completed_at: datetime | None = None,
    ):
        candidate = validate_completion(CompletionCandidate(
            account_id=account_id,
            puzzle_type=puzzle_type,
            difficulty=difficulty,
            time_taken=time_taken,
            hint_count=hint_count,
            completed_at=completed_at,
        ))
        self._require_account(account_id)
        record = self._records.add(candidate)
        log.info(
            "Stored record %s: %s %s/%s (%ss, %s hints)",
            record.record_id, record.account_id, record.puzzle_type,
            record.difficulty, record.time_taken, record.hint_count,
        )
        return record

    @_log_store_failures
    def delete_record(self, account_id: str, record_id: int) -> bool:
        validate_account_id(account_id)
        record = self._records.get(record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found.")
        if record.account_id != account_id:
            raise OwnershipError(f"Record {record_id} does not belong to {account_id}.")
        deleted = self._records.delete(record_id)
        log.info("Deleted record %s for %s", record_id, account_id)
        return deleted

    @_log_store_failures
    def delete_all_records(self, account_id: str) -> int:
        validate_account_id(account_id)
        count = self._records.delete_by_account(account_id)
        log.info("Deleted %d records for %s", count, account_id)
        return count

    # -- listings --------------------------------------------------------

    @_log_store_failures
    def get_records(
        self,
        account_id: str,
        puzzle_type: str | None = None,
        difficulty: str | None = None,
        page: int | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> dict:
        validate_account_id(account_id)
        self._require_account(account_id)
        if date_from is not None and date_to is not None:
            validate_date_range(date_from, date_to)

        window = paginate(page=page, limit=limit, offset=offset)
        query = RecordQuery(
            account_id=account_id,
            puzzle_type=puzzle_type,
            difficulty=difficulty,
            date_from=date_from,
            date_to=date_to,
            order_by=parse_sort(sort_by, sort_order),
            limit=window.limit,
            offset=window.offset,
        )
        return {
            "records": self._records.find(query),
            "total": self._records.count(query),
            "page": window.page,
            "limit": window.limit,
        }

    @_log_store_failures
    def get_recent_records(self, account_id: str, limit: int | None = None) -> list:
        validate_account_id(account_id)
        return self._records.find(RecordQuery(
            account_id=account_id,
            order_by=((RecordField.COMPLETED_AT, True), (RecordField.RECORD_ID, True)),
            limit=clamp_recent_limit(limit),
        ))

    @_log_store_failures
    def get_records_by_date_range(self, account_id: str, start: datetime, end: datetime) -> list:
        validate_account_id(account_id)
        start, end = validate_date_range(start, end)
        return self._records.find(RecordQuery(
            account_id=account_id,
            date_from=start,
            date_to=end,
            order_by=((RecordField.COMPLETED_AT, True), (RecordField.RECORD_ID, True)),
        ))

    @_log_store_failures
    def get_low_hint_records(self, account_id: str, max_hints: int,
                             puzzle_type: str | None = None) -> list:
        validate_account_id(account_id)
        require_max_hints(max_hints)
        return self._records.find(RecordQuery(
            account_id=account_id,
            puzzle_type=puzzle_type,
            max_hints=max_hints,
            order_by=((RecordField.HINT_COUNT, False), (RecordField.TIME_TAKEN, False),
                      (RecordField.RECORD_ID, False)),
        ))

    @_log_store_failures
    def get_fast_records(self, account_id: str, max_time: int,
                         puzzle_type: str | None = None) -> list:
        validate_account_id(account_id)
        require_max_time(max_time)
        return self._records.find(RecordQuery(
            account_id=account_id,
            puzzle_type=puzzle_type,
            max_time=max_time,
            order_by=((RecordField.TIME_TAKEN, False), (RecordField.RECORD_ID, False)),
        ))

    # -- analytics -------------------------------------------------------

    @_log_store_failures
    def get_stats(self, account_id: str):
        validate_account_id(account_id)
        return summarize(self._records.find(RecordQuery(account_id=account_id)))

    @_log_store_failures
    def get_best_records(self, account_id: str):
        validate_account_id(account_id)
        return resolve_best_records(self._records.find(RecordQuery(account_id=account_id)))

    @_log_store_failures
    def get_daily_stats(self, account_id: str, days: int | None = None,
                        now: datetime | None = None) -> list:
        validate_account_id(account_id)
        now = now or datetime.now(timezone.utc)
        since = daily_window_start(clamp_days(days), now)
        return daily_buckets(self._records.find(RecordQuery(
            account_id=account_id,
            date_from=since,
            date_to=now,
        )))

    @_log_store_failures
    def get_global_ranking(self, puzzle_type: str, difficulty: str | None = None,
                           limit: int | None = None) -> list:
        if not puzzle_type or not puzzle_type.strip():
            raise ValidationError("puzzle_type is required.")
        return global_ranking(self._records, puzzle_type, difficulty, clamp_ranking_limit(limit))

    @_log_store_failures
    def get_personal_ranking(self, account_id: str, puzzle_type: str,
                             difficulty: str | None = None):
        validate_account_id(account_id)
        if not puzzle_type or not puzzle_type.strip():
            raise ValidationError("puzzle_type is required.")
        return personal_ranking(
            self._records, account_id, puzzle_type, difficulty, self._scan_limit,
        )
