"""Action log: asynchronous, best-effort audit trail.

Events are recorded in the request path, buffered in a bounded queue
and persisted by a single background worker.
"""

from medcenter.audit.models import AuditEvent, AuditLogFilter, AuditLogPage
from medcenter.audit.pipeline import ActionLogPipeline
from medcenter.audit.queue import BoundedEventQueue
from medcenter.audit.registry import AuditedOperationRegistry, default_registry
from medcenter.audit.service import ActionLogger
from medcenter.audit.store import AuditLogStore
from medcenter.audit.worker import QueueDrainWorker, WorkerState, WorkerStats

__all__ = [
    "ActionLogPipeline",
    "ActionLogger",
    "AuditEvent",
    "AuditLogFilter",
    "AuditLogPage",
    "AuditLogStore",
    "AuditedOperationRegistry",
    "BoundedEventQueue",
    "QueueDrainWorker",
    "WorkerState",
    "WorkerStats",
    "default_registry",
]
