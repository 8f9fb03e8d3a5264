"""Puzzle record persistence (JSON file)."""
import json
import os
import threading
from typing import List

from puzzlebase.domain.errors import StoreError
from puzzlebase.domain.record import CompletionCandidate, CompletionRecord, RecordQuery

_LOCK = threading.Lock()


def apply_order(records: List[CompletionRecord], order_by) -> List[CompletionRecord]:
    """Sort by several keys using successive stable sorts, last key first."""
    ordered = list(records)
    for field, descending in reversed(tuple(order_by)):
        ordered.sort(key=lambda r: getattr(r, field.value), reverse=descending)
    return ordered


class JsonRecordRepository:
    """File-based record store. Development and tests only."""

    def __init__(self, data_path: str = "data/records.json"):
        self._data_path = data_path

    def add(self, candidate: CompletionCandidate) -> CompletionRecord:
        with _LOCK:
            data = self._load()
            record = CompletionRecord(
                record_id=data["next_id"],
                account_id=candidate.account_id,
                puzzle_type=candidate.puzzle_type,
                difficulty=candidate.difficulty,
                time_taken=candidate.time_taken,
                hint_count=candidate.hint_count,
                completed_at=candidate.completed_at,
            )
            data["records"].append(record.to_dict())
            data["next_id"] += 1
            self._save(data)
            return record

    def get(self, record_id: int) -> CompletionRecord | None:
        return next((r for r in self._all() if r.record_id == record_id), None)

    def find(self, query: RecordQuery) -> List[CompletionRecord]:
        rows = apply_order([r for r in self._all() if query.matches(r)], query.order_by)
        rows = rows[query.offset:]
        if query.limit is not None:
            rows = rows[:query.limit]
        return rows

    def count(self, query: RecordQuery) -> int:
        return sum(1 for r in self._all() if query.matches(r))

    def delete(self, record_id: int) -> bool:
        with _LOCK:
            data = self._load()
            kept = [r for r in data["records"] if int(r["record_id"]) != record_id]
            if len(kept) == len(data["records"]):
                return False
            data["records"] = kept
            self._save(data)
            return True

    def delete_by_account(self, account_id: str) -> int:
        with _LOCK:
            data = self._load()
            kept = [r for r in data["records"] if r["account_id"] != account_id]
            removed = len(data["records"]) - len(kept)
            if removed:
                data["records"] = kept
                self._save(data)
            return removed

    def _all(self) -> List[CompletionRecord]:
        return [CompletionRecord.from_dict(r) for r in self._load()["records"]]

    def _load(self) -> dict:
        if not os.path.exists(self._data_path):
            return {"next_id": 1, "records": []}
        try:
            with open(self._data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as exc:
            raise StoreError(f"Cannot read record store {self._data_path}: {exc}") from exc
        if isinstance(data, list):
            # Bare list of records without a sequence counter.
            next_id = max((int(r["record_id"]) for r in data), default=0) + 1
            return {"next_id": next_id, "records": data}
        return data

    def _save(self, data: dict) -> None:
        # Readers never take the lock; they must only ever see a complete file.
        tmp_path = f"{self._data_path}.tmp"
        try:
            os.makedirs(os.path.dirname(self._data_path) or ".", exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._data_path)
        except OSError as exc:
            raise StoreError(f"Cannot write record store {self._data_path}: {exc}") from exc
