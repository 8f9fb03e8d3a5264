"""PostgreSQL-backed puzzle record repository."""
import functools
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from puzzlebase.domain.errors import StoreError
from puzzlebase.domain.record import (
    CompletionCandidate, CompletionRecord, RecordQuery, as_utc,
)
from puzzlebase.infrastructure.database.models import AccountModel, PuzzleRecordModel


def _store_call(method):
    """Surface driver/ORM failures as StoreError, keeping the original as cause."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise StoreError(f"{method.__name__}: {type(exc).__name__}: {exc}") from exc

    return wrapper


def _to_record(row: PuzzleRecordModel) -> CompletionRecord:
    return CompletionRecord(
        record_id=row.record_id,
        account_id=row.account_id,
        puzzle_type=row.puzzle_type,
        difficulty=row.difficulty,
        time_taken=row.time_taken,
        hint_count=row.hint_count,
        completed_at=as_utc(row.completed_at),
    )


class PgRecordRepository:
    """Puzzle record persistence via PostgreSQL."""

    def __init__(self, session_factory):
        self._sf = session_factory

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @_store_call
    def add(self, candidate: CompletionCandidate) -> CompletionRecord:
        """Insert one record; the database sequence assigns record_id."""
        with self._sf() as session:
            row = PuzzleRecordModel(
                account_id=candidate.account_id,
                puzzle_type=candidate.puzzle_type,
                difficulty=candidate.difficulty,
                time_taken=candidate.time_taken,
                hint_count=candidate.hint_count,
                completed_at=candidate.completed_at,
            )
            session.add(row)
            session.commit()
            return _to_record(row)

    @_store_call
    def delete(self, record_id: int) -> bool:
        with self._sf() as session:
            deleted = (
                session.query(PuzzleRecordModel)
                .filter(PuzzleRecordModel.record_id == record_id)
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted > 0

    @_store_call
    def delete_by_account(self, account_id: str) -> int:
        with self._sf() as session:
            deleted = (
                session.query(PuzzleRecordModel)
                .filter(PuzzleRecordModel.account_id == account_id)
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @_store_call
    def get(self, record_id: int) -> CompletionRecord | None:
        with self._sf() as session:
            row = session.get(PuzzleRecordModel, record_id)
            return _to_record(row) if row else None

    @_store_call
    def find(self, query: RecordQuery) -> List[CompletionRecord]:
        with self._sf() as session:
            q = self._filtered(session, query)
            for field, descending in query.order_by:
                column = getattr(PuzzleRecordModel, field.value)
                q = q.order_by(column.desc() if descending else column.asc())
            if query.offset:
                q = q.offset(query.offset)
            if query.limit is not None:
                q = q.limit(query.limit)
            return [_to_record(r) for r in q.all()]

    @_store_call
    def count(self, query: RecordQuery) -> int:
        with self._sf() as session:
            return self._filtered(session, query).count()

    @staticmethod
    def _filtered(session, query: RecordQuery):
        m = PuzzleRecordModel
        q = session.query(m)
        if query.account_id is not None:
            q = q.filter(m.account_id == query.account_id)
        if query.puzzle_type is not None:
            q = q.filter(m.puzzle_type == query.puzzle_type)
        if query.difficulty is not None:
            q = q.filter(m.difficulty == query.difficulty)
        if query.date_from is not None:
            q = q.filter(m.completed_at >= as_utc(query.date_from))
        if query.date_to is not None:
            q = q.filter(m.completed_at <= as_utc(query.date_to))
        if query.max_hints is not None:
            q = q.filter(m.hint_count <= query.max_hints)
        if query.max_time is not None:
            q = q.filter(m.time_taken <= query.max_time)
        return q


class PgAccountRepository:
    """Account existence lookups via PostgreSQL."""

    def __init__(self, session_factory):
        self._sf = session_factory

    @_store_call
    def exists(self, account_id: str) -> bool:
        with self._sf() as session:
            return session.get(AccountModel, account_id) is not None
