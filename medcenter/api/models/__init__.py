"""API request and response models."""

from medcenter.api.models.action_logs import (
    ActionLogItem,
    ActionLogListResponse,
    PaginationMetadata,
)
from medcenter.api.models.claims import (
    ClaimChangeResponse,
    ClaimRequest,
    ClaimResponse,
    PermissionsResponse,
    UserClaimsResponse,
)
from medcenter.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from medcenter.api.models.health import ComponentHealth, HealthResponse

__all__ = [
    "ActionLogItem",
    "ActionLogListResponse",
    "ClaimChangeResponse",
    "ClaimRequest",
    "ClaimResponse",
    "ComponentHealth",
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "PaginationMetadata",
    "PermissionsResponse",
    "UserClaimsResponse",
]
