"""Puzzle record API routes -- submit, list, stats, best records, rankings, delete."""
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from puzzlebase.domain.errors import NotFoundError, OwnershipError, StoreError, ValidationError


router = APIRouter(prefix="/api/puzzle", tags=["puzzle"])


class CompletionRequest(BaseModel):
    puzzle_type: str
    difficulty: str
    time_taken: int
    hint_count: int
    completed_at: Optional[datetime] = None


_service = None


def init_routes(record_service):
    global _service
    _service = record_service


@contextmanager
def _domain_errors():
    """Translate domain errors into HTTP responses."""
    try:
        yield
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OwnershipError:
        # Masked: callers must not learn that someone else's record exists.
        raise HTTPException(status_code=404, detail="Record not found") from None
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except StoreError as e:
        raise HTTPException(status_code=503, detail="Record store unavailable") from e


def _records(rows) -> list:
    return [r.to_dict() for r in rows]


# ---------------------------------------------------------------------------
# Global (not tied to one account)
# ---------------------------------------------------------------------------

@router.get("/ranking/{puzzle_type}")
def api_global_ranking(puzzle_type: str, difficulty: Optional[str] = None, limit: int = 100):
    """Leaderboard for a puzzle type. Fewer hints first, then faster."""
    with _domain_errors():
        entries = _service.get_global_ranking(puzzle_type, difficulty, limit)
    return [e.to_dict() for e in entries]


# ---------------------------------------------------------------------------
# Account records
# ---------------------------------------------------------------------------

@router.post("/{account_id}")
def api_add_completion(account_id: str, req: CompletionRequest):
    """Store one puzzle completion."""
    with _domain_errors():
        record = _service.add_completion(
            account_id=account_id,
            puzzle_type=req.puzzle_type,
            difficulty=req.difficulty,
            time_taken=req.time_taken,
            hint_count=req.hint_count,
            completed_at=req.completed_at,
        )
    return record.to_dict()


@router.get("/{account_id}")
def api_get_records(
    account_id: str,
    puzzle_type: Optional[str] = None,
    difficulty: Optional[str] = None,
    page: Optional[int] = None,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
):
    """Paged record listing with optional filters and sorting."""
    with _domain_errors():
        result = _service.get_records(
            account_id,
            puzzle_type=puzzle_type,
            difficulty=difficulty,
            page=page,
            limit=limit,
            offset=offset,
            sort_by=sort_by,
            sort_order=sort_order,
            date_from=date_from,
            date_to=date_to,
        )
    result["records"] = _records(result["records"])
    return result


@router.get("/{account_id}/stats")
def api_get_stats(account_id: str):
    with _domain_errors():
        return _service.get_stats(account_id).to_dict()


@router.get("/{account_id}/best")
def api_get_best_records(account_id: str):
    with _domain_errors():
        return _service.get_best_records(account_id).to_dict()


@router.get("/{account_id}/recent")
def api_get_recent_records(account_id: str, limit: int = 10):
    with _domain_errors():
        return _records(_service.get_recent_records(account_id, limit))


@router.get("/{account_id}/date-range")
def api_get_records_by_date_range(account_id: str, start_date: datetime, end_date: datetime):
    with _domain_errors():
        return _records(_service.get_records_by_date_range(account_id, start_date, end_date))


@router.get("/{account_id}/daily-stats")
def api_get_daily_stats(account_id: str, days: int = 30):
    """One entry per day with records; empty days are omitted."""
    with _domain_errors():
        return [d.to_dict() for d in _service.get_daily_stats(account_id, days)]


@router.get("/{account_id}/low-hints")
def api_get_low_hint_records(account_id: str, max_hints: int, puzzle_type: Optional[str] = None):
    with _domain_errors():
        return _records(_service.get_low_hint_records(account_id, max_hints, puzzle_type))


@router.get("/{account_id}/fast-records")
def api_get_fast_records(account_id: str, max_time: int, puzzle_type: Optional[str] = None):
    with _domain_errors():
        return _records(_service.get_fast_records(account_id, max_time, puzzle_type))


@router.get("/{account_id}/ranking/{puzzle_type}")
def api_personal_ranking(account_id: str, puzzle_type: str, difficulty: Optional[str] = None):
    """Where the account stands in the global ranking for a puzzle type."""
    with _domain_errors():
        return _service.get_personal_ranking(account_id, puzzle_type, difficulty).to_dict()


@router.delete("/{account_id}/all")
def api_delete_all_records(account_id: str):
    with _domain_errors():
        deleted = _service.delete_all_records(account_id)
    return {"deleted": deleted}


@router.delete("/{account_id}/{record_id}")
def api_delete_record(account_id: str, record_id: int):
    with _domain_errors():
        _service.delete_record(account_id, record_id)
    return {"deleted": True, "record_id": record_id}
