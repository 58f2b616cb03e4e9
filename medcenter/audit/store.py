"""AuditLogStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from uuid import UUID

from medcenter.audit.models import AuditEvent, AuditLogFilter, AuditLogPage


class AuditLogStore(ABC):
    """Durable, append-only storage for action log events.

    Writes come from the drain worker only; reads come from any number
    of query callers and may not yet see the most recent batch.
    Appends are idempotent on the event id, so an event delivered twice
    is stored once.
    """

    @abstractmethod
    async def append(self, event: AuditEvent) -> None:
        """Persist one event.

        Raises:
            StorageError: If the backend rejects or cannot take the write
        """
        pass

    @abstractmethod
    async def append_many(self, events: Sequence[AuditEvent]) -> None:
        """Persist a batch of events in order, all or nothing.

        Raises:
            StorageError: If the backend rejects or cannot take the write
        """
        pass

    @abstractmethod
    async def get(self, event_id: UUID) -> AuditEvent | None:
        """Get an event by ID."""
        pass

    @abstractmethod
    async def query(
        self,
        filters: AuditLogFilter | None = None,
        *,
        page_number: int = 1,
        page_size: int = 20,
    ) -> AuditLogPage:
        """Return one page of matching events, most recent first.

        Pages are 1-based. A page past the end has no items but still
        reports the full total_count.

        Raises:
            ValueError: If page_number or page_size is below 1
            StorageError: If the backend read fails
        """
        pass
