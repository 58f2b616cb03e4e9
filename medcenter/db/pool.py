"""PostgreSQL connection pool management.

A single asyncpg pool is shared by the audit and identity stores.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from medcenter.db.errors import ConnectionError, StorageError
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresPool:
    """Lazily connected asyncpg pool.

    Usage:
        pool = PostgresPool(dsn="postgresql://...")
        await pool.connect()
        try:
            async with pool.acquire() as conn:
                await conn.fetch("SELECT ...")
        finally:
            await pool.close()
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ) -> None:
        """Initialize pool configuration.

        Args:
            dsn: Database connection string. Falls back to environment variables.
            min_size: Minimum number of connections to keep open.
            max_size: Maximum number of connections in the pool.
            command_timeout: Default timeout for statements (seconds).
        """
        self._dsn = dsn or self._get_dsn_from_env()
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @staticmethod
    def _get_dsn_from_env() -> str:
        dsn = os.environ.get("MEDCENTER_DATABASE_URL") or os.environ.get("DATABASE_URL")
        if dsn:
            return dsn

        host = os.environ.get("POSTGRES_HOST", "localhost")
        port = os.environ.get("POSTGRES_PORT", "5432")
        user = os.environ.get("POSTGRES_USER", "medcenter")
        password = os.environ.get("POSTGRES_PASSWORD", "medcenter")
        database = os.environ.get("POSTGRES_DB", "medcenter")
        return f"postgresql://{user}:{password}@{host}:{port}/{database}"

    async def connect(self) -> None:
        """Create the underlying pool if it does not exist yet."""
        if self._pool is not None:
            return

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except (OSError, asyncpg.PostgresError) as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info(
            "postgres_pool_connected",
            min_size=self._min_size,
            max_size=self._max_size,
        )

    async def close(self) -> None:
        """Close the pool gracefully."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection, connecting the pool on first use.

        Driver errors raised inside the block surface as StorageError.
        """
        if self._pool is None:
            await self.connect()
        assert self._pool is not None

        try:
            async with self._pool.acquire() as connection:
                yield connection
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("postgres_statement_failed", error=str(e))
            raise StorageError(f"PostgreSQL error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """Return True if the pool answers a trivial query."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True

    @property
    def is_connected(self) -> bool:
        return self._pool is not None
