"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed JSON, bad query parameters, etc.)."""

    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    """No valid bearer token was presented."""

    ACCESS_DENIED = "ACCESS_DENIED"
    """The caller is authenticated but does not satisfy the policy."""

    NOT_FOUND = "NOT_FOUND"
    """The addressed resource does not exist."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level detail for validation failures."""

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "ACCESS_DENIED",
                "message": "Policy CanViewAuditLog denied"
            }
        }
    """

    error: ErrorBody
