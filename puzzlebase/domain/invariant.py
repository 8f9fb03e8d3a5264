"""Validation guards for completion submissions and account references."""
import re
from dataclasses import replace
from datetime import datetime, timezone

from puzzlebase.domain.errors import ValidationError
from puzzlebase.domain.record import CompletionCandidate, as_utc

ACCOUNT_ID_PATTERN = re.compile(r"[A-Z0-9]{12}")

MAX_PUZZLE_TYPE_LENGTH = 50
MAX_DIFFICULTY_LENGTH = 20
MAX_TIME_TAKEN = 86400
MAX_HINT_COUNT = 100


def validate_account_id(account_id: str | None) -> str:
    """Raises if the account reference is missing or malformed."""
    if not account_id or not isinstance(account_id, str) or not ACCOUNT_ID_PATTERN.fullmatch(account_id):
        raise ValidationError(
            "account_id must be 12 uppercase letters or digits."
        )
    return account_id


def _validate_label(name: str, value: str | None, max_length: int) -> None:
    if not value or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required.")
    if len(value) > max_length:
        raise ValidationError(f"{name} must be at most {max_length} characters.")


def _validate_bounded_int(name: str, value, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer.")
    if value < 0 or value > upper:
        raise ValidationError(f"{name} must be between 0 and {upper}. Got: {value}.")


def validate_completion(
    candidate: CompletionCandidate,
    now: datetime | None = None,
) -> CompletionCandidate:
    """
    Check a submission in a fixed order; the first failing check raises.
    Returns the candidate with completed_at normalized to aware UTC
    (defaulting to now when omitted).
    """
    now = as_utc(now) if now else datetime.now(timezone.utc)

    validate_account_id(candidate.account_id)
    _validate_label("puzzle_type", candidate.puzzle_type, MAX_PUZZLE_TYPE_LENGTH)
    _validate_label("difficulty", candidate.difficulty, MAX_DIFFICULTY_LENGTH)
    _validate_bounded_int("time_taken", candidate.time_taken, MAX_TIME_TAKEN)
    _validate_bounded_int("hint_count", candidate.hint_count, MAX_HINT_COUNT)

    if candidate.completed_at is None:
        return replace(candidate, completed_at=now)

    completed_at = as_utc(candidate.completed_at)
    if completed_at > now:
        raise ValidationError("completed_at cannot be in the future.")
    return replace(candidate, completed_at=completed_at)
