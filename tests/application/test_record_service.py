"""Tests for RecordService -- use cases over a JSON record store."""
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from puzzlebase.application.record_service import RecordService
from puzzlebase.domain.errors import NotFoundError, OwnershipError, StoreError, ValidationError
from puzzlebase.domain.record import RecordQuery
from tests.conftest import ACCOUNT_A, ACCOUNT_B, BASE_TIME, UNKNOWN_ACCOUNT


def _add(service, account_id=ACCOUNT_A, **kwargs):
    payload = {
        "puzzle_type": "chess_puzzle",
        "difficulty": "easy",
        "time_taken": 120,
        "hint_count": 0,
        "completed_at": BASE_TIME,
    }
    payload.update(kwargs)
    return service.add_completion(account_id=account_id, **payload)


class TestAddCompletion:
    def test_stored_record_gets_sequence_id(self, service):
        first = _add(service)
        second = _add(service)
        assert (first.record_id, second.record_id) == (1, 2)

    def test_hint_count_150_rejected_and_not_persisted(self, service, record_repo):
        with pytest.raises(ValidationError, match="hint_count"):
            _add(service, hint_count=150)
        assert record_repo.find(RecordQuery()) == []

    def test_unknown_account_not_found(self, service):
        with pytest.raises(NotFoundError):
            _add(service, account_id=UNKNOWN_ACCOUNT)

    def test_trailing_newline_account_rejected_without_account_repo(self, record_repo):
        service = RecordService(record_repo)
        with pytest.raises(ValidationError, match="account_id"):
            _add(service, account_id=ACCOUNT_A + "\n")
        assert record_repo.find(RecordQuery()) == []

    def test_completed_at_defaults_to_now(self, service):
        before = datetime.now(timezone.utc)
        record = _add(service, completed_at=None)
        assert record.completed_at >= before

    def test_logs_stored_record(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="puzzlebase.records"):
            _add(service)
        assert "Stored record 1" in caplog.text


class TestGetRecords:
    def test_paged_listing(self, service):
        for i in range(25):
            _add(service, completed_at=BASE_TIME + timedelta(minutes=i))
        result = service.get_records(ACCOUNT_A, page=3, limit=10)
        assert result["total"] == 25
        assert result["page"] == 3
        assert result["limit"] == 10
        assert len(result["records"]) == 5

    def test_default_sort_newest_first(self, service):
        _add(service, completed_at=BASE_TIME)
        _add(service, completed_at=BASE_TIME + timedelta(hours=1))
        records = service.get_records(ACCOUNT_A)["records"]
        assert records[0].completed_at > records[1].completed_at

    def test_sort_by_hint_count_ascending(self, service):
        _add(service, hint_count=3)
        _add(service, hint_count=1)
        records = service.get_records(ACCOUNT_A, sort_by="hint_count", sort_order="ASC")["records"]
        assert [r.hint_count for r in records] == [1, 3]

    def test_filters_and_total_agree(self, service):
        _add(service, difficulty="easy")
        _add(service, difficulty="hard")
        result = service.get_records(ACCOUNT_A, difficulty="hard")
        assert result["total"] == 1
        assert result["records"][0].difficulty == "hard"

    def test_date_filters_over_a_year_rejected(self, service):
        with pytest.raises(ValidationError):
            service.get_records(ACCOUNT_A, date_from=BASE_TIME - timedelta(days=400), date_to=BASE_TIME)

    def test_unknown_account_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get_records(UNKNOWN_ACCOUNT)

    def test_malformed_account_rejected(self, service):
        with pytest.raises(ValidationError):
            service.get_records("bad")


class TestRecentAndRanges:
    def test_recent_limited_and_newest_first(self, service):
        for i in range(5):
            _add(service, completed_at=BASE_TIME + timedelta(minutes=i))
        recent = service.get_recent_records(ACCOUNT_A, limit=2)
        assert [r.record_id for r in recent] == [5, 4]

    def test_date_range_inclusive(self, service):
        _add(service, completed_at=BASE_TIME - timedelta(days=2))
        _add(service, completed_at=BASE_TIME)
        rows = service.get_records_by_date_range(ACCOUNT_A, BASE_TIME - timedelta(days=1), BASE_TIME)
        assert [r.record_id for r in rows] == [2]

    def test_date_range_over_365_days_fails(self, service):
        _add(service)
        with pytest.raises(ValidationError):
            service.get_records_by_date_range(ACCOUNT_A, BASE_TIME - timedelta(days=366), BASE_TIME)

    def test_low_hint_records(self, service):
        _add(service, hint_count=0)
        _add(service, hint_count=4)
        rows = service.get_low_hint_records(ACCOUNT_A, 1)
        assert [r.hint_count for r in rows] == [0]

    def test_low_hint_negative_threshold(self, service):
        with pytest.raises(ValidationError):
            service.get_low_hint_records(ACCOUNT_A, -1)

    def test_fast_records_filtered_by_type(self, service):
        _add(service, time_taken=30)
        _add(service, time_taken=30, puzzle_type="sudoku")
        _add(service, time_taken=500)
        rows = service.get_fast_records(ACCOUNT_A, 60, puzzle_type="sudoku")
        assert [r.puzzle_type for r in rows] == ["sudoku"]

    def test_fast_records_zero_threshold(self, service):
        with pytest.raises(ValidationError):
            service.get_fast_records(ACCOUNT_A, 0)


class TestAnalytics:
    def test_stats_scoped_to_account(self, service):
        _add(service, time_taken=100)
        _add(service, account_id=ACCOUNT_B, time_taken=10)
        stats = service.get_stats(ACCOUNT_A)
        assert stats.total_puzzles == 1
        assert stats.best_time == 100

    def test_best_records(self, service):
        _add(service, hint_count=1, time_taken=50)
        _add(service, hint_count=0, time_taken=90)
        best = service.get_best_records(ACCOUNT_A)
        assert best.best_time.time_taken == 50
        assert best.fewest_hints.hint_count == 0

    def test_daily_stats_only_days_with_records(self, service):
        now = datetime.now(timezone.utc)
        day_a = (now - timedelta(days=3)).replace(hour=10, minute=0, second=0, microsecond=0)
        day_b = (now - timedelta(days=10)).replace(hour=9, minute=0, second=0, microsecond=0)
        _add(service, completed_at=day_a, time_taken=100, hint_count=1)
        _add(service, completed_at=day_a + timedelta(hours=1), time_taken=60, hint_count=2)
        _add(service, completed_at=day_b, time_taken=40, hint_count=0)
        _add(service, completed_at=now - timedelta(days=60))

        stats = service.get_daily_stats(ACCOUNT_A, days=30, now=now)
        assert [s.to_dict() for s in stats] == [
            {"date": day_a.date().isoformat(), "count": 2, "total_time": 160, "avg_hints": 2},
            {"date": day_b.date().isoformat(), "count": 1, "total_time": 40, "avg_hints": 0},
        ]

    def test_global_ranking_requires_type(self, service):
        with pytest.raises(ValidationError):
            service.get_global_ranking("  ")

    def test_global_ranking_clamps_limit(self, service):
        for _ in range(3):
            _add(service)
        assert len(service.get_global_ranking("chess_puzzle", limit=0)) == 1

    def test_personal_ranking(self, service):
        _add(service, account_id=ACCOUNT_B, hint_count=0, time_taken=10)
        _add(service, hint_count=0, time_taken=20)
        result = service.get_personal_ranking(ACCOUNT_A, "chess_puzzle")
        assert (result.rank, result.total_participants) == (2, 2)

    def test_personal_ranking_respects_scan_limit(self, record_repo, account_repo):
        service = RecordService(record_repo, account_repo, scan_limit=1)
        _add(service, account_id=ACCOUNT_B, time_taken=10)
        _add(service, time_taken=20)
        result = service.get_personal_ranking(ACCOUNT_A, "chess_puzzle")
        assert result.rank is None
        assert result.total_participants == 1


class TestDelete:
    def test_delete_own_record(self, service):
        record = _add(service)
        assert service.delete_record(ACCOUNT_A, record.record_id) is True
        assert service.get_stats(ACCOUNT_A).total_puzzles == 0

    def test_delete_missing_record(self, service):
        with pytest.raises(NotFoundError):
            service.delete_record(ACCOUNT_A, 999)

    def test_delete_other_accounts_record(self, service):
        record = _add(service, account_id=ACCOUNT_B)
        with pytest.raises(OwnershipError):
            service.delete_record(ACCOUNT_A, record.record_id)
        assert service.get_stats(ACCOUNT_B).total_puzzles == 1

    def test_ownership_error_is_not_not_found(self):
        assert not issubclass(OwnershipError, NotFoundError)

    def test_delete_all_records(self, service):
        _add(service)
        _add(service)
        _add(service, account_id=ACCOUNT_B)
        assert service.delete_all_records(ACCOUNT_A) == 2
        assert service.get_stats(ACCOUNT_B).total_puzzles == 1


class TestStoreFailures:
    def test_store_error_propagates_unchanged(self, caplog):
        store = MagicMock()
        failure = StoreError("connection lost")
        store.find.side_effect = failure
        service = RecordService(store)
        with caplog.at_level(logging.ERROR, logger="puzzlebase.records"):
            with pytest.raises(StoreError) as exc_info:
                service.get_stats(ACCOUNT_A)
        assert exc_info.value is failure
        assert "get_stats failed" in caplog.text
        assert store.find.call_count == 1

    def test_no_account_repo_skips_existence_check(self, record_repo):
        service = RecordService(record_repo)
        assert _add(service, account_id=UNKNOWN_ACCOUNT).account_id == UNKNOWN_ACCOUNT
