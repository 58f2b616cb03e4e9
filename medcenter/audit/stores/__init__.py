"""Action log store implementations."""

from medcenter.audit.store import AuditLogStore
from medcenter.audit.stores.inmemory import InMemoryAuditLogStore
from medcenter.audit.stores.postgres import PostgresAuditLogStore

__all__ = [
    "AuditLogStore",
    "InMemoryAuditLogStore",
    "PostgresAuditLogStore",
]
