"""Producer-side entry point of the action log.

Request handlers call ActionLogger after an action has succeeded. The
call builds the event synchronously and hands it to the queue; it
never waits on storage and never fails because the queue is full.
"""

from typing import Any
from uuid import UUID

from medcenter.audit.models import AuditEvent
from medcenter.audit.queue import BoundedEventQueue
from medcenter.audit.registry import AuditedOperationRegistry, default_registry
from medcenter.observability.logging import get_logger
from medcenter.observability.metrics import ACTION_LOG_DROPPED, ACTION_LOG_ENQUEUED

logger = get_logger(__name__)


class ActionLogger:
    """Records audit events onto a BoundedEventQueue."""

    def __init__(
        self,
        queue: BoundedEventQueue,
        registry: AuditedOperationRegistry | None = None,
    ) -> None:
        self._queue = queue
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> AuditedOperationRegistry:
        return self._registry

    def record(
        self,
        action_name: str,
        description: str,
        actor_id: UUID | None = None,
        payload: Any = None,
    ) -> bool:
        """Build an event and enqueue it.

        Returns:
            True if the event was queued, False if it was dropped

        Raises:
            pydantic.ValidationError: If action_name or description is blank
        """
        event = AuditEvent.create(action_name, description, actor_id, payload)
        return self.record_event(event)

    def record_event(self, event: AuditEvent) -> bool:
        """Enqueue an already constructed event."""
        if self._queue.enqueue(event):
            ACTION_LOG_ENQUEUED.inc()
            return True

        reason = "queue_closed" if self._queue.closed else "queue_full"
        ACTION_LOG_DROPPED.labels(reason=reason).inc()
        logger.warning(
            "action_log_dropped",
            reason=reason,
            action_name=event.action_name,
            event_id=str(event.id),
            queue_capacity=self._queue.capacity,
        )
        return False

    def record_operation(
        self,
        operation_id: str,
        actor_id: UUID | None = None,
        payload: Any = None,
    ) -> bool:
        """Record a registered operation under its registry description.

        Unregistered operations are ignored and return False.
        """
        description = self._registry.description_for(operation_id)
        if description is None:
            logger.debug("action_log_operation_not_audited", operation_id=operation_id)
            return False
        return self.record(operation_id, description, actor_id, payload)
