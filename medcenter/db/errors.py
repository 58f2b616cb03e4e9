"""Store error hierarchy shared by every storage backend.

Backends wrap driver-specific exceptions in one of these so callers
never depend on asyncpg (or any other driver) directly.
"""


class StoreError(Exception):
    """Base exception for all store errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StorageError(StoreError):
    """Raised when a read or write against the backend fails.

    Covers both transient faults (timeouts, dropped connections) and
    permanent ones (missing table, rejected statement).
    """


class ConnectionError(StorageError):
    """Raised when the backend cannot be reached at all."""


class NotFoundError(StoreError):
    """Raised when a write targets an entity that does not exist."""
