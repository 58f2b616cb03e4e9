"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, route registration and the action log pipeline
lifecycle.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from pydantic import ValidationError

from medcenter import __version__
from medcenter.api.dependencies import get_audit_store, get_settings, reset_dependencies
from medcenter.api.exceptions import MedCenterAPIError
from medcenter.api.middleware.action_log import ActionLogMiddleware
from medcenter.api.middleware.context import RequestContextMiddleware
from medcenter.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from medcenter.api.routes import register_routes
from medcenter.audit.pipeline import ActionLogPipeline
from medcenter.audit.registry import default_registry
from medcenter.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the action log pipeline and flush it on shutdown."""
    settings = get_settings()
    store = await get_audit_store()

    pipeline = ActionLogPipeline.from_config(settings.action_log, store, default_registry())
    pipeline.start()
    app.state.action_log_pipeline = pipeline

    try:
        yield
    finally:
        await pipeline.stop()
        await reset_dependencies()
        logger.info("app_shutdown_complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a fully configured FastAPI app with:
    - Structured logging
    - CORS middleware
    - Request context and action log middleware
    - Global exception handlers
    - Optional OpenTelemetry instrumentation
    - All API routes registered

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    logging_config = settings.observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )

    app = FastAPI(
        title="MedCenter API",
        description="Medical records backend with an asynchronous action log",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Audited operations are recorded inside the request context
    app.add_middleware(ActionLogMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    register_routes(app, expose_metrics=settings.observability.metrics.enabled)

    if settings.observability.tracing.enabled:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info(
        "app_created",
        app_name=settings.app_name,
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _validation_details(errors: list[dict]) -> list[ErrorDetail]:
    return [
        ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
        for error in errors
    ]


def _error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(mode="json"),
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(MedCenterAPIError)
    async def medcenter_api_error_handler(
        request: Request, exc: MedCenterAPIError
    ) -> JSONResponse:
        """Handle MedCenterAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(
            exc.status_code, ErrorBody(code=exc.error_code, message=exc.message)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", path=request.url.path)
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=_validation_details(list(exc.errors())),
            ),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.warning("pydantic_validation_error", path=request.url.path)
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Data validation failed",
                details=_validation_details(list(exc.errors())),
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(
            500,
            ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred"),
        )

    logger.debug("exception_handlers_registered")
