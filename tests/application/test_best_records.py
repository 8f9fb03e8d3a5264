"""Tests for resolve_best_records()."""
from puzzlebase.application.best_records import BestRecordSet, resolve_best_records
from tests.conftest import make_record


class TestBestRecordsEmpty:
    def test_no_records_gives_empty_set(self):
        best = resolve_best_records([])
        assert best == BestRecordSet()
        assert best.to_dict() == {
            "best_time": None,
            "fewest_hints": None,
            "best_by_type": {},
            "best_by_difficulty": {},
        }


class TestBestTime:
    def test_minimum_time_picked(self):
        records = [make_record(1, time_taken=90), make_record(2, time_taken=60), make_record(3, time_taken=75)]
        assert resolve_best_records(records).best_time.record_id == 2

    def test_time_tie_keeps_first_in_store_order(self):
        records = [make_record(1, time_taken=60, hint_count=5), make_record(2, time_taken=60, hint_count=0)]
        assert resolve_best_records(records).best_time.record_id == 1


class TestFewestHints:
    def test_hint_tie_broken_by_time(self):
        records = [
            make_record(1, hint_count=0, time_taken=120),
            make_record(2, hint_count=2, time_taken=30),
            make_record(3, hint_count=0, time_taken=80),
        ]
        assert resolve_best_records(records).fewest_hints.record_id == 3

    def test_pick_dominates_every_record(self):
        records = [
            make_record(i, hint_count=h, time_taken=t)
            for i, (h, t) in enumerate([(3, 50), (1, 200), (1, 90), (4, 10), (1, 90)], start=1)
        ]
        pick = resolve_best_records(records).fewest_hints
        assert all(pick.hint_count <= r.hint_count for r in records)
        tied = [r for r in records if r.hint_count == pick.hint_count]
        assert pick.time_taken == min(r.time_taken for r in tied)
        assert pick.record_id == 3


class TestBestPerGroup:
    def test_best_by_type_uses_canonical_order(self):
        records = [
            make_record(1, puzzle_type="chess_puzzle", hint_count=1, time_taken=40),
            make_record(2, puzzle_type="chess_puzzle", hint_count=0, time_taken=200),
            make_record(3, puzzle_type="sudoku", hint_count=2, time_taken=100),
            make_record(4, puzzle_type="sudoku", hint_count=2, time_taken=90),
        ]
        best = resolve_best_records(records)
        assert best.best_by_type["chess_puzzle"].record_id == 2
        assert best.best_by_type["sudoku"].record_id == 4

    def test_best_by_difficulty_keys_exact(self):
        records = [
            make_record(1, difficulty="hard", hint_count=0, time_taken=300),
            make_record(2, difficulty="Hard", hint_count=0, time_taken=100),
        ]
        best = resolve_best_records(records).best_by_difficulty
        assert best["hard"].record_id == 1
        assert best["Hard"].record_id == 2

    def test_to_dict_serializes_records(self):
        d = resolve_best_records([make_record(5)]).to_dict()
        assert d["best_time"]["record_id"] == 5
        assert d["best_by_type"]["chess_puzzle"]["record_id"] == 5
