"""Health check and metrics endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from medcenter import __version__
from medcenter.api.dependencies import (
    ActionLogPipelineDep,
    AuditLogStoreDep,
    IdentityStoreDep,
    current_postgres_pool,
)
from medcenter.api.models.health import ComponentHealth, HealthResponse, HealthStatus
from medcenter.audit.pipeline import ActionLogPipeline
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()
metrics_router = APIRouter()

# Queue utilization above which the pipeline reports degraded
QUEUE_DEGRADED_THRESHOLD = 0.9


def _check_store_health(store: object, name: str) -> ComponentHealth:
    if store is None:
        return ComponentHealth(name=name, status="unhealthy", message="Store not initialized")
    return ComponentHealth(name=name, status="healthy", message=type(store).__name__)


async def _check_postgres_health() -> ComponentHealth | None:
    pool = current_postgres_pool()
    if pool is None:
        return None
    start = time.perf_counter()
    healthy = await pool.health_check()
    return ComponentHealth(
        name="postgres",
        status="healthy" if healthy else "unhealthy",
        latency_ms=(time.perf_counter() - start) * 1000,
    )


def _check_pipeline_health(pipeline: ActionLogPipeline) -> ComponentHealth:
    depth = len(pipeline.queue)
    message = (
        f"worker={pipeline.worker.state.value} "
        f"queue={depth}/{pipeline.queue.capacity} "
        f"failed={pipeline.worker.stats.failed}"
    )
    status: HealthStatus
    if not pipeline.is_draining:
        status = "unhealthy"
    elif pipeline.queue_utilization > QUEUE_DEGRADED_THRESHOLD:
        status = "degraded"
    else:
        status = "healthy"
    return ComponentHealth(name="action_log_pipeline", status=status, message=message)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    audit_store: AuditLogStoreDep,
    identity_store: IdentityStoreDep,
    pipeline: ActionLogPipelineDep,
) -> HealthResponse:
    """Check service health status.

    Returns the overall status along with the status of the stores and
    the action log pipeline.
    """
    components = [
        _check_store_health(audit_store, "audit_store"),
        _check_store_health(identity_store, "identity_store"),
        _check_pipeline_health(pipeline),
    ]
    postgres = await _check_postgres_health()
    if postgres is not None:
        components.append(postgres)

    overall_status: HealthStatus
    if any(c.status == "unhealthy" for c in components):
        overall_status = "unhealthy"
    elif any(c.status == "degraded" for c in components):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    logger.debug("health_check_completed", status=overall_status)

    return HealthResponse(
        status=overall_status,
        version=__version__,
        components=components,
        timestamp=datetime.now(UTC),
    )


@metrics_router.get("/metrics")
async def get_metrics() -> Response:
    """Get Prometheus metrics in text format for scraping."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
