"""Tests for QueueDrainWorker."""

import asyncio
import threading
from collections.abc import Sequence
from uuid import UUID

import pytest
from prometheus_client import REGISTRY

from medcenter.audit.models import AuditEvent
from medcenter.audit.queue import BoundedEventQueue
from medcenter.audit.stores.inmemory import InMemoryAuditLogStore
from medcenter.audit.worker import QueueDrainWorker, WorkerState
from medcenter.db.errors import StorageError

from builders import make_event, make_events


class FlakyStore(InMemoryAuditLogStore):
    """Fails the first ``failures`` batch writes."""

    def __init__(self, failures: int, error: Exception | None = None) -> None:
        super().__init__()
        self.failures = failures
        self.error = error or StorageError("database unavailable")
        self.calls = 0

    async def append_many(self, events: Sequence[AuditEvent]) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        await super().append_many(events)


class SlowStore(InMemoryAuditLogStore):
    """Takes ``delay`` seconds per batch write."""

    def __init__(self, delay: float) -> None:
        super().__init__()
        self.delay = delay

    async def append_many(self, events: Sequence[AuditEvent]) -> None:
        await asyncio.sleep(self.delay)
        await super().append_many(events)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.fixture
def queue() -> BoundedEventQueue:
    return BoundedEventQueue(100)


@pytest.fixture
def store() -> InMemoryAuditLogStore:
    return InMemoryAuditLogStore()


class TestLifecycle:
    """Tests for worker state transitions."""

    async def test_initial_state_is_starting(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store)
        assert worker.state is WorkerState.STARTING

    async def test_start_moves_to_draining(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store)
        worker.start()
        await asyncio.sleep(0)

        assert worker.state is WorkerState.DRAINING
        await worker.stop()

    async def test_start_twice_raises(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store)
        worker.start()
        with pytest.raises(RuntimeError):
            worker.start()
        await worker.stop()

    async def test_stop_ends_in_stopped_and_closes_queue(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store)
        worker.start()
        await worker.stop()

        assert worker.state is WorkerState.STOPPED
        assert queue.closed is True

    async def test_stop_without_start(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store)
        await worker.stop()
        assert worker.state is WorkerState.STOPPED

    async def test_stop_without_start_counts_buffered_as_dropped(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        labels = {"reason": "shutdown"}
        before = REGISTRY.get_sample_value("medcenter_action_log_dropped_total", labels) or 0.0
        worker = QueueDrainWorker(queue, store)
        for e in make_events(3):
            queue.enqueue(e)

        await worker.stop()
        await worker.stop()

        assert worker.state is WorkerState.STOPPED
        assert worker.stats.dropped == 3
        assert len(store) == 0
        after = REGISTRY.get_sample_value("medcenter_action_log_dropped_total", labels)
        assert after == before + 3

    async def test_stop_is_idempotent(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store)
        worker.start()
        await worker.stop()
        await worker.stop()
        assert worker.state is WorkerState.STOPPED

    def test_rejects_non_positive_batch_size(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        with pytest.raises(ValueError):
            QueueDrainWorker(queue, store, batch_size=0)


class TestDraining:
    """Tests for moving events into the store."""

    async def test_persists_events_in_enqueue_order(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        worker = QueueDrainWorker(queue, store, batch_size=7)
        worker.start()

        events = make_events(50)
        for e in events:
            queue.enqueue(e)

        await wait_until(lambda: len(store) == 50)
        assert list(store.entries) == events
        await worker.stop()

    async def test_batches_respect_batch_size(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        for e in make_events(25):
            queue.enqueue(e)
        worker = QueueDrainWorker(queue, store, batch_size=10)
        worker.start()
        await worker.stop()

        assert worker.stats.batches == 3
        assert worker.stats.persisted == 25

    async def test_shutdown_flushes_buffered_events(
        self, queue: BoundedEventQueue, store: InMemoryAuditLogStore
    ) -> None:
        """Events still buffered at stop() reach the store."""
        worker = QueueDrainWorker(queue, store)
        worker.start()

        for e in make_events(30):
            queue.enqueue(e)
        await worker.stop()

        assert len(store) == 30
        assert worker.stats.dropped == 0

    async def test_storage_failure_does_not_stop_the_loop(
        self, queue: BoundedEventQueue
    ) -> None:
        """A failed batch is dropped and later batches still persist."""
        store = FlakyStore(failures=1)
        worker = QueueDrainWorker(queue, store)
        worker.start()

        lost = make_event(action_name="Lost")
        queue.enqueue(lost)
        await wait_until(lambda: worker.stats.failed == 1)

        kept = make_event(action_name="Kept")
        queue.enqueue(kept)
        await wait_until(lambda: len(store) == 1)

        assert worker.state is WorkerState.DRAINING
        assert list(store.entries) == [kept]
        await worker.stop()

    async def test_unexpected_error_is_contained(self, queue: BoundedEventQueue) -> None:
        store = FlakyStore(failures=1, error=RuntimeError("boom"))
        worker = QueueDrainWorker(queue, store)
        worker.start()

        queue.enqueue(make_event())
        await wait_until(lambda: worker.stats.failed == 1)
        queue.enqueue(make_event())
        await wait_until(lambda: worker.stats.persisted == 1)

        assert worker.state is WorkerState.DRAINING
        await worker.stop()

    async def test_slow_write_times_out_and_loop_continues(
        self, queue: BoundedEventQueue
    ) -> None:
        store = SlowStore(delay=0.5)
        worker = QueueDrainWorker(queue, store, persist_timeout_seconds=0.05)
        worker.start()

        queue.enqueue(make_event())
        await wait_until(lambda: worker.stats.failed == 1)

        assert worker.state is WorkerState.DRAINING
        assert len(store) == 0
        await worker.stop(grace_period=0.1)


class TestShutdownGrace:
    """Tests for the shutdown grace period."""

    async def test_expired_grace_counts_remaining_as_dropped(
        self, queue: BoundedEventQueue
    ) -> None:
        store = SlowStore(delay=5.0)
        worker = QueueDrainWorker(queue, store, batch_size=2, persist_timeout_seconds=10.0)
        worker.start()

        for e in make_events(6):
            queue.enqueue(e)
        await asyncio.sleep(0.01)

        await worker.stop(grace_period=0.05)

        assert worker.state is WorkerState.STOPPED
        assert worker.stats.dropped == 6
        assert len(store) == 0


class TestConcurrentProducers:
    """Producer threads racing a live drain loop."""

    async def test_every_accepted_event_is_persisted_in_order(
        self, store: InMemoryAuditLogStore
    ) -> None:
        queue = BoundedEventQueue(1000)
        worker = QueueDrainWorker(queue, store, batch_size=50)
        worker.start()
        accepted: list[AuditEvent] = []
        lock = threading.Lock()

        def produce(producer: int) -> None:
            actor = UUID(int=producer + 1)
            kept = []
            for seq in range(100):
                event = make_event(actor_id=actor, description=str(seq))
                if queue.enqueue(event):
                    kept.append(event)
            with lock:
                accepted.extend(kept)

        def run_producers() -> None:
            threads = [threading.Thread(target=produce, args=(p,)) for p in range(50)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        await asyncio.to_thread(run_producers)
        await worker.stop()

        persisted = store.entries
        assert len(persisted) == len(accepted)
        assert {e.id for e in persisted} == {e.id for e in accepted}
        assert worker.stats.persisted == len(accepted)
        assert worker.stats.dropped == 0

        by_actor: dict[UUID, list[int]] = {}
        for e in persisted:
            by_actor.setdefault(e.actor_id, []).append(int(e.description))
        for seqs in by_actor.values():
            assert seqs == sorted(seqs)
