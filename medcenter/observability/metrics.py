"""Prometheus metrics for MedCenter.

The action log pipeline is best-effort, so drops and persistence
failures show up here rather than as errors to end users.
"""

from prometheus_client import Counter, Gauge, Histogram

# Request metrics
REQUEST_COUNT = Counter(
    "medcenter_request_count_total",
    "Total number of HTTP requests processed",
    labelnames=["method", "route", "status"],
)

# Action log pipeline metrics
ACTION_LOG_ENQUEUED = Counter(
    "medcenter_action_log_enqueued_total",
    "Action log events accepted by the in-memory queue",
)

ACTION_LOG_DROPPED = Counter(
    "medcenter_action_log_dropped_total",
    "Action log events that were dropped before reaching storage",
    labelnames=["reason"],
)

ACTION_LOG_PERSISTED = Counter(
    "medcenter_action_log_persisted_total",
    "Action log events written to the audit store",
)

ACTION_LOG_PERSIST_FAILURES = Counter(
    "medcenter_action_log_persist_failures_total",
    "Batches the drain worker failed to persist",
    labelnames=["error_type"],
)

ACTION_LOG_QUEUE_DEPTH = Gauge(
    "medcenter_action_log_queue_depth",
    "Action log events currently buffered in memory",
)

ACTION_LOG_PERSIST_LATENCY = Histogram(
    "medcenter_action_log_persist_latency_seconds",
    "Time spent persisting one batch of action log events",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# Authorization metrics
POLICY_EVALUATIONS = Counter(
    "medcenter_policy_evaluations_total",
    "Claims-based policy evaluations",
    labelnames=["policy", "outcome"],
)
