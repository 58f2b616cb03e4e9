"""Background drain loop moving action log events into durable storage.

The worker is the queue's only consumer. It pulls batches in FIFO
order and writes them sequentially, so events from one producer reach
the store in the order they were recorded. A failed batch is logged,
counted and dropped; the loop itself never dies from a storage error.
"""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum

from medcenter.audit.queue import BoundedEventQueue
from medcenter.audit.store import AuditLogStore
from medcenter.db.errors import StorageError
from medcenter.observability.logging import get_logger
from medcenter.observability.metrics import (
    ACTION_LOG_DROPPED,
    ACTION_LOG_PERSIST_FAILURES,
    ACTION_LOG_PERSIST_LATENCY,
    ACTION_LOG_PERSISTED,
)

logger = get_logger(__name__)


class WorkerState(str, Enum):
    """Lifecycle of the drain worker."""

    STARTING = "starting"
    DRAINING = "draining"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


@dataclass
class WorkerStats:
    """Counters since the worker was created."""

    batches: int = 0
    persisted: int = 0
    failed: int = 0
    dropped: int = 0


class QueueDrainWorker:
    """Single asyncio task that drains a BoundedEventQueue into a store.

    Usage:
        worker = QueueDrainWorker(queue, store, batch_size=100)
        worker.start()          # inside a running event loop
        ...
        await worker.stop()     # flushes what it can within the grace period
    """

    def __init__(
        self,
        queue: BoundedEventQueue,
        store: AuditLogStore,
        *,
        batch_size: int = 100,
        persist_timeout_seconds: float = 10.0,
        shutdown_grace_seconds: float = 5.0,
    ) -> None:
        """Initialize worker.

        Args:
            queue: Queue to consume from
            store: Destination for persisted events
            batch_size: Maximum events per store call
            persist_timeout_seconds: Upper bound for one batch write
            shutdown_grace_seconds: Default time allowed for the final flush
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self._queue = queue
        self._store = store
        self._batch_size = batch_size
        self._persist_timeout = persist_timeout_seconds
        self._shutdown_grace = shutdown_grace_seconds
        self._state = WorkerState.STARTING
        self._task: asyncio.Task | None = None
        self._in_flight = 0
        self._stats = WorkerStats()

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def stats(self) -> WorkerStats:
        return self._stats

    def start(self) -> None:
        """Schedule the drain loop on the running event loop.

        Raises:
            RuntimeError: If the worker was already started, or if no
                event loop is running
        """
        if self._task is not None:
            raise RuntimeError("QueueDrainWorker already started")

        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="action-log-drain"
        )
        logger.info(
            "action_log_worker_started",
            batch_size=self._batch_size,
            queue_capacity=self._queue.capacity,
        )

    async def stop(self, grace_period: float | None = None) -> None:
        """Close the queue and wait for the remaining events to drain.

        If the grace period expires first, the loop is cancelled and
        whatever is still buffered is counted as dropped.

        Args:
            grace_period: Seconds to wait; defaults to the configured
                shutdown grace
        """
        if self._state is WorkerState.STOPPED and self._queue.closed:
            return

        grace = self._shutdown_grace if grace_period is None else grace_period
        self._state = WorkerState.SHUTTING_DOWN
        self._queue.close()

        if self._task is not None:
            try:
                await asyncio.wait_for(asyncio.shield(self._task), timeout=grace)
            except TimeoutError:
                in_flight = self._in_flight
                self._task.cancel()
                try:
                    await self._task
                except asyncio.CancelledError:
                    pass
                remaining = len(self._queue) + in_flight
                self._count_shutdown_drops(remaining)
                logger.warning(
                    "action_log_shutdown_timeout",
                    grace_period=grace,
                    dropped=remaining,
                )
        elif len(self._queue):
            # Never started, so nothing will drain what is buffered
            remaining = len(self._queue)
            self._count_shutdown_drops(remaining)
            logger.warning("action_log_stopped_before_start", dropped=remaining)

        self._state = WorkerState.STOPPED
        logger.info(
            "action_log_worker_stopped",
            batches=self._stats.batches,
            persisted=self._stats.persisted,
            failed=self._stats.failed,
            dropped=self._stats.dropped,
        )

    async def _run(self) -> None:
        if self._state is WorkerState.STARTING:
            self._state = WorkerState.DRAINING
        try:
            while True:
                batch = await self._queue.dequeue_batch(self._batch_size)
                if not batch:
                    # Closed and drained
                    break
                await self._persist(batch)
        finally:
            self._state = WorkerState.STOPPED

    async def _persist(self, batch: list) -> None:
        self._in_flight = len(batch)
        started = time.perf_counter()
        try:
            await asyncio.wait_for(
                self._store.append_many(batch), timeout=self._persist_timeout
            )
        except TimeoutError:
            self._record_failure(batch, "timeout")
            logger.error(
                "action_log_persist_failed",
                error_type="timeout",
                count=len(batch),
                timeout_seconds=self._persist_timeout,
            )
        except StorageError as e:
            self._record_failure(batch, "storage")
            logger.error(
                "action_log_persist_failed",
                error_type="storage",
                count=len(batch),
                error=str(e),
            )
        except Exception as e:
            self._record_failure(batch, type(e).__name__)
            logger.exception(
                "action_log_persist_failed",
                error_type=type(e).__name__,
                count=len(batch),
                error=str(e),
            )
        else:
            self._stats.batches += 1
            self._stats.persisted += len(batch)
            ACTION_LOG_PERSISTED.inc(len(batch))
            logger.debug("action_log_batch_persisted", count=len(batch))
        finally:
            self._in_flight = 0
            ACTION_LOG_PERSIST_LATENCY.observe(time.perf_counter() - started)

    def _count_shutdown_drops(self, count: int) -> None:
        if count:
            self._stats.dropped += count
            ACTION_LOG_DROPPED.labels(reason="shutdown").inc(count)

    def _record_failure(self, batch: list, error_type: str) -> None:
        self._stats.batches += 1
        self._stats.failed += len(batch)
        ACTION_LOG_PERSIST_FAILURES.labels(error_type=error_type).inc()
