"""API route registration."""

from fastapi import APIRouter, FastAPI

from medcenter.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from medcenter.api.routes.action_logs import router as action_logs_router
    from medcenter.api.routes.claims import router as claims_router
    from medcenter.api.routes.permissions import router as permissions_router

    router.include_router(action_logs_router, tags=["Action Logs"])
    router.include_router(claims_router, tags=["Claims"])
    router.include_router(permissions_router, tags=["Permissions"])

    logger.debug("v1_router_created", routes=["action_logs", "claims", "permissions"])

    return router


def register_routes(app: FastAPI, *, expose_metrics: bool = True) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(create_v1_router())

    # Health and metrics live at root level
    from medcenter.api.routes.health import metrics_router
    from medcenter.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])
    if expose_metrics:
        app.include_router(metrics_router, tags=["Health"])

    logger.info("routes_registered")
