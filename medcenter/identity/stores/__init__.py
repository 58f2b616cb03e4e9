"""IdentityStore implementations."""

from medcenter.identity.store import IdentityStore
from medcenter.identity.stores.inmemory import InMemoryIdentityStore
from medcenter.identity.stores.postgres import PostgresIdentityStore

__all__ = [
    "IdentityStore",
    "InMemoryIdentityStore",
    "PostgresIdentityStore",
]
