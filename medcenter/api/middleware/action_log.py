"""Middleware that records audited operations after they succeed."""

import json
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from medcenter.audit.pipeline import ActionLogPipeline
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class ActionLogMiddleware(BaseHTTPMiddleware):
    """Records an action log event for successful audited requests.

    A request is audited when the name of the route it matches is in
    the pipeline's operation registry. The event carries the caller as
    actor and a snapshot of path params, query params and JSON body.
    Only 2xx responses are recorded, and nothing this middleware does
    can change the response.
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        pipeline: ActionLogPipeline | None = getattr(
            request.app.state, "action_log_pipeline", None
        )
        operation_id, path_params = (None, {})
        if pipeline is not None:
            operation_id, path_params = self._match_route(request)

        if operation_id is None or operation_id not in pipeline.logger.registry:
            return await call_next(request)  # type: ignore[misc]

        body = await self._read_body(request)
        response = await call_next(request)  # type: ignore[misc]

        if 200 <= response.status_code < 300:
            self._record(request, pipeline, operation_id, path_params, body)
        return response  # type: ignore[no-any-return]

    @staticmethod
    def _match_route(request: Request) -> tuple[str | None, dict[str, Any]]:
        for route in request.app.router.routes:
            match, child_scope = route.matches(request.scope)
            if match == Match.FULL:
                return getattr(route, "name", None), child_scope.get("path_params", {})
        return None, {}

    @staticmethod
    async def _read_body(request: Request) -> Any:
        if request.method not in _BODY_METHODS:
            return None
        try:
            raw = await request.body()
        except Exception as e:
            logger.warning("action_log_body_read_failed", error=str(e))
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None

    @staticmethod
    def _record(
        request: Request,
        pipeline: ActionLogPipeline,
        operation_id: str,
        path_params: dict[str, Any],
        body: Any,
    ) -> None:
        caller = getattr(request.state, "caller", None)
        actor_id = caller.user_id if caller is not None else None
        payload = {
            "path": {k: str(v) for k, v in path_params.items()},
            "query": dict(request.query_params),
            "body": body,
        }
        try:
            pipeline.logger.record_operation(operation_id, actor_id, payload)
        except Exception as e:
            logger.error(
                "action_log_record_failed",
                operation_id=operation_id,
                error=str(e),
                error_type=type(e).__name__,
            )
