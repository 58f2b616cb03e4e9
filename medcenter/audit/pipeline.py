"""Assembly of queue, drain worker and producer for one process."""

from medcenter.audit.queue import BoundedEventQueue
from medcenter.audit.registry import AuditedOperationRegistry
from medcenter.audit.service import ActionLogger
from medcenter.audit.store import AuditLogStore
from medcenter.audit.worker import QueueDrainWorker, WorkerState
from medcenter.config.models.action_log import ActionLogConfig


class ActionLogPipeline:
    """Owns the action log components for the lifetime of the app.

    Usage:
        pipeline = ActionLogPipeline.from_config(settings.action_log, store)
        pipeline.start()
        pipeline.logger.record("CreateUser", "Created a user", actor_id)
        await pipeline.stop()
    """

    def __init__(
        self,
        queue: BoundedEventQueue,
        worker: QueueDrainWorker,
        logger: ActionLogger,
    ) -> None:
        self.queue = queue
        self.worker = worker
        self.logger = logger

    @classmethod
    def from_config(
        cls,
        config: ActionLogConfig,
        store: AuditLogStore,
        registry: AuditedOperationRegistry | None = None,
    ) -> "ActionLogPipeline":
        queue = BoundedEventQueue(config.queue_capacity)
        worker = QueueDrainWorker(
            queue,
            store,
            batch_size=config.batch_size,
            persist_timeout_seconds=config.persist_timeout_seconds,
            shutdown_grace_seconds=config.shutdown_grace_seconds,
        )
        return cls(queue, worker, ActionLogger(queue, registry))

    def start(self) -> None:
        self.worker.start()

    async def stop(self, grace_period: float | None = None) -> None:
        await self.worker.stop(grace_period)

    @property
    def is_draining(self) -> bool:
        return self.worker.state is WorkerState.DRAINING

    @property
    def queue_utilization(self) -> float:
        """Fraction of the queue capacity currently in use."""
        return len(self.queue) / self.queue.capacity
