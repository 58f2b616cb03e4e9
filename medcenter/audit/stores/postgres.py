"""PostgreSQL implementation of AuditLogStore.

Uses asyncpg through the shared PostgresPool.
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from medcenter.audit.models import AuditEvent, AuditLogFilter, AuditLogPage, validate_page
from medcenter.audit.store import AuditLogStore
from medcenter.db.errors import StorageError
from medcenter.db.pool import PostgresPool
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, action_name, description, actor_id, payload, occurred_at"

_INSERT = f"""
    INSERT INTO action_logs ({_COLUMNS})
    VALUES ($1, $2, $3, $4, $5, $6)
    ON CONFLICT (id) DO NOTHING
"""


class PostgresAuditLogStore(AuditLogStore):
    """PostgreSQL-backed action log.

    Rows are insert-only. A batch is written inside one transaction so
    it either lands completely or not at all.
    """

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def append(self, event: AuditEvent) -> None:
        await self.append_many([event])

    async def append_many(self, events: Sequence[AuditEvent]) -> None:
        if not events:
            return
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(_INSERT, [self._to_row(e) for e in events])
        except StorageError as e:
            logger.error("postgres_action_log_append_failed", count=len(events), error=str(e))
            raise
        logger.debug("action_log_batch_saved", count=len(events))

    async def get(self, event_id: UUID) -> AuditEvent | None:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_COLUMNS} FROM action_logs WHERE id = $1",
                    event_id,
                )
        except StorageError as e:
            logger.error("postgres_action_log_get_failed", event_id=str(event_id), error=str(e))
            raise
        return self._from_row(row) if row else None

    async def query(
        self,
        filters: AuditLogFilter | None = None,
        *,
        page_number: int = 1,
        page_size: int = 20,
    ) -> AuditLogPage:
        validate_page(page_number, page_size)
        where, params = self._build_where(filters or AuditLogFilter())

        count_sql = f"SELECT COUNT(*) FROM action_logs{where}"
        page_sql = (
            f"SELECT {_COLUMNS} FROM action_logs{where}"
            f" ORDER BY occurred_at DESC, id"
            f" LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}"
        )

        try:
            async with self._pool.acquire() as conn:
                total = await conn.fetchval(count_sql, *params)
                rows = await conn.fetch(
                    page_sql, *params, page_size, (page_number - 1) * page_size
                )
        except StorageError as e:
            logger.error("postgres_action_log_query_failed", error=str(e))
            raise

        return AuditLogPage(
            items=[self._from_row(row) for row in rows],
            page_number=page_number,
            page_size=page_size,
            total_count=total,
        )

    @staticmethod
    def _build_where(filters: AuditLogFilter) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []

        if filters.start_date is not None:
            params.append(filters.start_date)
            clauses.append(f"occurred_at >= ${len(params)}")
        if filters.end_date is not None:
            params.append(filters.end_date)
            clauses.append(f"occurred_at <= ${len(params)}")
        if filters.actor_id is not None:
            params.append(filters.actor_id)
            clauses.append(f"actor_id = ${len(params)}")
        if filters.action_name is not None:
            params.append(filters.action_name)
            clauses.append(f"action_name = ${len(params)}")

        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    @staticmethod
    def _to_row(event: AuditEvent) -> tuple[Any, ...]:
        return (
            event.id,
            event.action_name,
            event.description,
            event.actor_id,
            event.payload,
            event.occurred_at,
        )

    @staticmethod
    def _from_row(row: Any) -> AuditEvent:
        return AuditEvent(
            id=row["id"],
            action_name=row["action_name"],
            description=row["description"],
            actor_id=row["actor_id"],
            payload=row["payload"],
            occurred_at=row["occurred_at"],
        )
