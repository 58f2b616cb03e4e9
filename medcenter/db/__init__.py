"""Database access: connection pool, store errors and migrations."""

from medcenter.db.errors import ConnectionError, NotFoundError, StorageError, StoreError
from medcenter.db.pool import PostgresPool

__all__ = [
    "ConnectionError",
    "NotFoundError",
    "PostgresPool",
    "StorageError",
    "StoreError",
]
