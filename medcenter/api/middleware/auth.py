"""JWT authentication and policy enforcement for API requests."""

import os
from collections.abc import Awaitable, Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from medcenter.api.dependencies import PolicyEvaluatorDep, SettingsDep
from medcenter.api.exceptions import AccessDeniedError, AuthenticationRequiredError
from medcenter.identity.claims import CallerIdentity
from medcenter.identity.policies import PolicyName
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

# Security scheme for OpenAPI docs
security_scheme = HTTPBearer(auto_error=False)


def get_jwt_secret() -> str:
    """Get JWT secret from environment."""
    secret = os.environ.get("MEDCENTER_JWT_SECRET")
    if not secret:
        raise RuntimeError("MEDCENTER_JWT_SECRET environment variable not set")
    return secret


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_caller_identity(
    request: Request,
    settings: SettingsDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)],
) -> CallerIdentity:
    """Read the caller from an optional bearer token.

    No token yields an anonymous caller; whether that is acceptable is
    up to the route's policy. The resolved caller is also stored on
    ``request.state.caller`` for the action log middleware.

    Raises:
        HTTPException: 401 if a token is present but invalid or expired
    """
    if credentials is None:
        caller = CallerIdentity.anonymous()
        request.state.caller = caller
        return caller

    try:
        payload = jwt.decode(
            credentials.credentials,
            get_jwt_secret(),
            algorithms=[settings.api.jwt_algorithm],
        )
        subject = payload.get("sub")
        if not subject:
            logger.warning("auth_missing_subject", path=request.url.path)
            raise _unauthorized("Token missing sub claim")

        caller = CallerIdentity(
            user_id=UUID(str(subject)),
            roles=frozenset(payload.get("roles") or []),
        )
    except JWTError as e:
        logger.warning("auth_jwt_error", error=str(e), path=request.url.path)
        raise _unauthorized("Invalid or expired token") from None
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning("auth_invalid_claims", error=str(e), path=request.url.path)
        raise _unauthorized("Invalid token claims") from None

    logger.debug("auth_success", user_id=str(caller.user_id))
    request.state.caller = caller
    return caller


CallerDep = Annotated[CallerIdentity, Depends(get_caller_identity)]


async def require_authenticated(caller: CallerDep) -> CallerIdentity:
    """Reject anonymous callers with 401."""
    if not caller.is_authenticated:
        raise AuthenticationRequiredError("Authentication required")
    return caller


AuthenticatedCallerDep = Annotated[CallerIdentity, Depends(require_authenticated)]


def require_policy(
    policy: PolicyName,
) -> Callable[..., Awaitable[CallerIdentity]]:
    """Build a dependency that enforces ``policy`` on the caller.

    Usage:
        @router.get("/action-logs")
        async def list_logs(
            caller: Annotated[CallerIdentity, Depends(require_policy(PolicyName.CAN_VIEW_AUDIT_LOG))],
        ): ...
    """

    async def _enforce(
        caller: CallerDep,
        evaluator: PolicyEvaluatorDep,
    ) -> CallerIdentity:
        if await evaluator.evaluate(policy, caller):
            return caller

        logger.info(
            "policy_denied",
            policy=policy.value,
            user_id=str(caller.user_id) if caller.user_id else None,
        )
        if not caller.is_authenticated:
            raise AuthenticationRequiredError("Authentication required")
        raise AccessDeniedError(f"Policy {policy.value} denied")

    return _enforce
