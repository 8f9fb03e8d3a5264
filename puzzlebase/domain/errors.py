"""Domain error kinds.

Each subclasses the builtin the route layer already maps to a status code,
so code that only knows about ValueError/LookupError keeps working.
"""


class ValidationError(ValueError):
    """Malformed or out-of-range input. Message names the violated constraint."""


class NotFoundError(LookupError):
    """Referenced account or record does not exist."""


class OwnershipError(PermissionError):
    """Record exists but belongs to another account."""


class StoreError(RuntimeError):
    """The underlying record store failed. Never retried here."""
