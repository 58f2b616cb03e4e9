"""API exception hierarchy for consistent error handling.

All API exceptions inherit from MedCenterAPIError, which carries the
status_code and error_code the global handler renders as ErrorResponse.
"""

from medcenter.api.models.errors import ErrorCode


class MedCenterAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(MedCenterAPIError):
    """Raised when request validation fails."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class AuthenticationRequiredError(MedCenterAPIError):
    """Raised when a policy-gated route is called without a valid token."""

    status_code = 401
    error_code = ErrorCode.AUTHENTICATION_REQUIRED


class AccessDeniedError(MedCenterAPIError):
    """Raised when an authenticated caller fails a policy."""

    status_code = 403
    error_code = ErrorCode.ACCESS_DENIED


class ResourceNotFoundError(MedCenterAPIError):
    """Raised when the addressed user or entry does not exist."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
