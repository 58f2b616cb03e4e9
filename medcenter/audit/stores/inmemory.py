"""In-memory implementation of AuditLogStore."""

from collections.abc import Sequence
from uuid import UUID

from medcenter.audit.models import AuditEvent, AuditLogFilter, AuditLogPage, validate_page
from medcenter.audit.store import AuditLogStore


class InMemoryAuditLogStore(AuditLogStore):
    """In-memory AuditLogStore for testing and development.

    Uses a dict for lookups plus a list that keeps append order, with a
    linear scan for queries. Not suitable for production use.
    """

    def __init__(self) -> None:
        self._by_id: dict[UUID, AuditEvent] = {}
        self._entries: list[AuditEvent] = []

    @property
    def entries(self) -> tuple[AuditEvent, ...]:
        """Stored events in the order they were appended."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    async def append(self, event: AuditEvent) -> None:
        if event.id in self._by_id:
            return
        self._by_id[event.id] = event
        self._entries.append(event)

    async def append_many(self, events: Sequence[AuditEvent]) -> None:
        for event in events:
            await self.append(event)

    async def get(self, event_id: UUID) -> AuditEvent | None:
        return self._by_id.get(event_id)

    async def query(
        self,
        filters: AuditLogFilter | None = None,
        *,
        page_number: int = 1,
        page_size: int = 20,
    ) -> AuditLogPage:
        validate_page(page_number, page_size)
        filters = filters or AuditLogFilter()

        # Newest first; ties keep the most recently appended first
        matching = sorted(
            (e for e in reversed(self._entries) if filters.matches(e)),
            key=lambda e: e.occurred_at,
            reverse=True,
        )
        offset = (page_number - 1) * page_size
        return AuditLogPage(
            items=matching[offset:offset + page_size],
            page_number=page_number,
            page_size=page_size,
            total_count=len(matching),
        )
