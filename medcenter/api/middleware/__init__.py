"""API middleware."""

from medcenter.api.middleware.action_log import ActionLogMiddleware
from medcenter.api.middleware.context import RequestContextMiddleware

__all__ = ["ActionLogMiddleware", "RequestContextMiddleware"]
