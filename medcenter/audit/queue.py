"""Bounded hand-off buffer between request handlers and the drain worker.

Producers may live on the event loop or on any other thread (sync
endpoints run in a thread pool); the single consumer is an asyncio
task. A plain lock guards the buffer and the consumer is woken through
``loop.call_soon_threadsafe``.

Full-queue policy: non-blocking drop. ``enqueue`` returns False at
once when the buffer is full or closed, and the caller decides how to
report it.
"""

import asyncio
import threading
from collections import deque

from medcenter.audit.models import AuditEvent
from medcenter.observability.metrics import ACTION_LOG_QUEUE_DEPTH


class BoundedEventQueue:
    """Thread-safe FIFO of AuditEvents with a fixed capacity.

    Usage:
        queue = BoundedEventQueue(capacity=1000)
        accepted = queue.enqueue(event)          # any thread, never blocks
        batch = await queue.dequeue_batch(100)   # consumer task only
        queue.close()                            # wakes the consumer
    """

    def __init__(self, capacity: int) -> None:
        """Initialize an empty queue.

        Args:
            capacity: Maximum number of events held at once

        Raises:
            ValueError: If capacity is not positive
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")

        self._capacity = capacity
        self._items: deque[AuditEvent] = deque()
        self._lock = threading.Lock()
        self._closed = False
        # Bound lazily to the consumer's loop on the first dequeue
        self._loop: asyncio.AbstractEventLoop | None = None
        self._wakeup: asyncio.Event | None = None

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def enqueue(self, event: AuditEvent) -> bool:
        """Add an event without blocking.

        Returns:
            True if the event was buffered; False if the queue is full
            or closed, in which case the event is dropped
        """
        with self._lock:
            if self._closed or len(self._items) >= self._capacity:
                return False
            self._items.append(event)
            depth = len(self._items)
            loop, wakeup = self._loop, self._wakeup

        ACTION_LOG_QUEUE_DEPTH.set(depth)
        if loop is not None and wakeup is not None:
            self._notify(loop, wakeup)
        return True

    async def dequeue_batch(self, max_items: int) -> list[AuditEvent]:
        """Remove up to ``max_items`` events in FIFO order.

        Suspends while the queue is empty and open. Must only be called
        from the single consumer task.

        Returns:
            A non-empty batch, or an empty list once the queue is both
            closed and drained

        Raises:
            ValueError: If max_items is not positive
        """
        if max_items <= 0:
            raise ValueError(f"max_items must be positive, got {max_items}")

        wakeup = self._bind_consumer()
        while True:
            # Clear before checking so a wake-up racing the check is not lost
            wakeup.clear()
            with self._lock:
                batch = [self._items.popleft() for _ in range(min(max_items, len(self._items)))]
                depth = len(self._items)
                closed = self._closed
            if batch:
                ACTION_LOG_QUEUE_DEPTH.set(depth)
                return batch
            if closed:
                return []
            await wakeup.wait()

    def close(self) -> None:
        """Stop accepting events and wake the consumer. Idempotent.

        Events already buffered stay available to ``dequeue_batch``.
        """
        with self._lock:
            self._closed = True
            loop, wakeup = self._loop, self._wakeup

        if loop is not None and wakeup is not None:
            self._notify(loop, wakeup)

    def _bind_consumer(self) -> asyncio.Event:
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._loop is not loop or self._wakeup is None:
                self._loop = loop
                self._wakeup = asyncio.Event()
            return self._wakeup

    @staticmethod
    def _notify(loop: asyncio.AbstractEventLoop, wakeup: asyncio.Event) -> None:
        try:
            loop.call_soon_threadsafe(wakeup.set)
        except RuntimeError:
            # Consumer loop already closed; nothing is waiting any more
            return
