"""
Exception hierarchy for BotCRUD.
Store misses are not exceptions; these cover programming faults and domain rule violations.
"""

__all__ = [
    "BotCrudError",
    "UnknownCollectionError",
    "DomainError",
    "BadRequestError",
    "NotFoundError",
    "ConflictError",
]


class BotCrudError(Exception):
    """Root exception for all BotCRUD errors."""


class UnknownCollectionError(BotCrudError, KeyError):
    """Raised when an operation names a collection the store was not configured with."""

    def __init__(self, collection: str):
        super().__init__(collection)
        self.collection = collection

    def __str__(self) -> str:
        return f"Unknown collection: {self.collection!r}"


# ── Domain ────────────────────────────────────────────────────────────────────

class DomainError(BotCrudError):
    """A rule violation the HTTP layer reports with ``status_code``."""

    status_code = 400
    error = "Bad Request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(DomainError):
    """Raised for malformed filters, invalid statuses or dangling references."""


class NotFoundError(DomainError):
    """Raised when an addressed record does not exist."""

    status_code = 404
    error = "Not Found"


class ConflictError(DomainError):
    """Raised on duplicate names or deletes blocked by dependent records."""

    status_code = 409
    error = "Conflict"
