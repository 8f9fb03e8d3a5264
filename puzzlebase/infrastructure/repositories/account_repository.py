"""Account lookup (JSON file). Accounts are owned elsewhere; only existence is read here."""
import json
import os

from puzzlebase.domain.errors import StoreError


class JsonAccountRepository:
    """File-based account directory: a JSON list of account ids."""

    def __init__(self, data_path: str = "data/accounts.json"):
        self._data_path = data_path

    def exists(self, account_id: str) -> bool:
        return account_id in self._load()

    def register(self, account_id: str) -> None:
        """Seed an account id. Used by dev tooling and tests."""
        accounts = self._load()
        if account_id in accounts:
            return
        accounts.append(account_id)
        os.makedirs(os.path.dirname(self._data_path) or ".", exist_ok=True)
        tmp_path = f"{self._data_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(accounts, f, indent=2)
        os.replace(tmp_path, self._data_path)

    def _load(self) -> list:
        if not os.path.exists(self._data_path):
            return []
        try:
            with open(self._data_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as exc:
            raise StoreError(f"Cannot read account store {self._data_path}: {exc}") from exc
