"""Dependency injection for API routes.

Provides FastAPI dependencies for stores, the action log pipeline and
the policy evaluator. Store backends are chosen from settings and can
be overridden for testing.
"""

from typing import Annotated

from fastapi import Depends, Request

from medcenter.audit.pipeline import ActionLogPipeline
from medcenter.audit.store import AuditLogStore
from medcenter.audit.stores.inmemory import InMemoryAuditLogStore
from medcenter.audit.stores.postgres import PostgresAuditLogStore
from medcenter.config import get_settings
from medcenter.config.settings import Settings
from medcenter.db.pool import PostgresPool
from medcenter.identity.policies import AccessPolicyEvaluator
from medcenter.identity.store import IdentityStore
from medcenter.identity.stores.inmemory import InMemoryIdentityStore
from medcenter.identity.stores.postgres import PostgresIdentityStore
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

# Connection pool shared across stores
_postgres_pool: PostgresPool | None = None

# Store instances - created once and reused
_audit_store: AuditLogStore | None = None
_identity_store: IdentityStore | None = None
_policy_evaluator: AccessPolicyEvaluator | None = None


async def get_postgres_pool() -> PostgresPool:
    """Get the shared PostgreSQL connection pool.

    Creates and connects the pool on first access. The DSN comes from
    MEDCENTER_DATABASE_URL (or DATABASE_URL).
    """
    global _postgres_pool
    if _postgres_pool is None:
        config = get_settings().storage.postgres
        pool = PostgresPool(
            min_size=config.min_pool_size,
            max_size=config.max_pool_size,
            command_timeout=config.command_timeout,
        )
        await pool.connect()
        _postgres_pool = pool
    return _postgres_pool


def current_postgres_pool() -> PostgresPool | None:
    """Return the shared pool if one has been created."""
    return _postgres_pool


async def get_audit_store() -> AuditLogStore:
    """Get the AuditLogStore instance.

    Uses PostgresAuditLogStore when configured. Falls back to
    InMemoryAuditLogStore if the database is unavailable.
    """
    global _audit_store
    if _audit_store is None:
        backend = get_settings().storage.audit.backend
        if backend == "postgres":
            try:
                pool = await get_postgres_pool()
                _audit_store = PostgresAuditLogStore(pool)
            except Exception as e:
                logger.warning("audit_store_postgres_failed_using_inmemory", error=str(e))
        if _audit_store is None:
            _audit_store = InMemoryAuditLogStore()
        logger.info("audit_store_initialized", store_type=type(_audit_store).__name__)
    return _audit_store


async def get_identity_store() -> IdentityStore:
    """Get the IdentityStore instance.

    Uses PostgresIdentityStore when configured. Falls back to
    InMemoryIdentityStore if the database is unavailable.
    """
    global _identity_store
    if _identity_store is None:
        backend = get_settings().storage.identity.backend
        if backend == "postgres":
            try:
                pool = await get_postgres_pool()
                _identity_store = PostgresIdentityStore(pool)
            except Exception as e:
                logger.warning("identity_store_postgres_failed_using_inmemory", error=str(e))
        if _identity_store is None:
            _identity_store = InMemoryIdentityStore()
        logger.info("identity_store_initialized", store_type=type(_identity_store).__name__)
    return _identity_store


async def get_policy_evaluator(
    identity_store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> AccessPolicyEvaluator:
    """Get the AccessPolicyEvaluator bound to the identity store."""
    global _policy_evaluator
    if _policy_evaluator is None:
        _policy_evaluator = AccessPolicyEvaluator(
            identity_store,
            cache_ttl_seconds=get_settings().authorization.claims_cache_ttl_seconds,
        )
        logger.info("policy_evaluator_initialized")
    return _policy_evaluator


def get_action_log_pipeline(request: Request) -> ActionLogPipeline:
    """Get the pipeline owned by the application lifespan."""
    return request.app.state.action_log_pipeline


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
AuditLogStoreDep = Annotated[AuditLogStore, Depends(get_audit_store)]
IdentityStoreDep = Annotated[IdentityStore, Depends(get_identity_store)]
PolicyEvaluatorDep = Annotated[AccessPolicyEvaluator, Depends(get_policy_evaluator)]
ActionLogPipelineDep = Annotated[ActionLogPipeline, Depends(get_action_log_pipeline)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure fresh instances.
    Closes connections before resetting.
    """
    global _postgres_pool, _audit_store, _identity_store, _policy_evaluator

    if _postgres_pool is not None:
        await _postgres_pool.close()
        _postgres_pool = None

    _audit_store = None
    _identity_store = None
    _policy_evaluator = None
    get_settings.cache_clear()
