"""Management of user claims.

Granting and revoking claims are audited operations; the route names
match the entries of the default operation registry.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from medcenter.api.dependencies import IdentityStoreDep, PolicyEvaluatorDep
from medcenter.api.exceptions import ResourceNotFoundError
from medcenter.api.middleware.auth import require_policy
from medcenter.api.models.claims import (
    ClaimChangeResponse,
    ClaimRequest,
    ClaimResponse,
    UserClaimsResponse,
)
from medcenter.db.errors import NotFoundError
from medcenter.identity.claims import AccessClaim, CallerIdentity
from medcenter.identity.policies import PolicyName
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/users/{user_id}/claims")

PrivilegedCaller = Annotated[
    CallerIdentity, Depends(require_policy(PolicyName.CAN_MANAGE_PRIVILEGED_ACCOUNTS))
]


@router.get("", response_model=UserClaimsResponse, name="ListUserClaims")
async def list_claims(
    user_id: UUID,
    _caller: PrivilegedCaller,
    identity_store: IdentityStoreDep,
) -> UserClaimsResponse:
    """List every claim attached to a user."""
    claims = await identity_store.get_claims(user_id)
    if claims is None:
        raise ResourceNotFoundError(f"User {user_id} not found")
    return UserClaimsResponse(
        user_id=user_id,
        claims=[ClaimResponse.from_claim(c) for c in claims],
    )


@router.post("", response_model=ClaimChangeResponse, name="GrantClaim")
async def grant_claim(
    user_id: UUID,
    request: ClaimRequest,
    caller: PrivilegedCaller,
    identity_store: IdentityStoreDep,
    evaluator: PolicyEvaluatorDep,
) -> ClaimChangeResponse:
    """Attach a claim to a user. Granting an existing claim is a no-op."""
    claim = AccessClaim(
        subject_id=user_id,
        claim_type=request.claim_type,
        claim_value=request.claim_value,
    )
    try:
        added = await identity_store.add_claim(claim)
    except NotFoundError:
        raise ResourceNotFoundError(f"User {user_id} not found") from None

    evaluator.invalidate(user_id)
    logger.info(
        "claim_granted" if added else "claim_grant_noop",
        user_id=str(user_id),
        claim_type=claim.claim_type,
        granted_by=str(caller.user_id),
    )
    return ClaimChangeResponse(
        user_id=user_id,
        claim_type=claim.claim_type,
        claim_value=claim.claim_value,
        changed=added,
    )


@router.delete("", response_model=ClaimChangeResponse, name="RevokeClaim")
async def revoke_claim(
    user_id: UUID,
    request: ClaimRequest,
    caller: PrivilegedCaller,
    identity_store: IdentityStoreDep,
    evaluator: PolicyEvaluatorDep,
) -> ClaimChangeResponse:
    """Detach a claim from a user. Revoking a missing claim is a no-op."""
    try:
        removed = await identity_store.remove_claim(
            user_id, request.claim_type, request.claim_value
        )
    except NotFoundError:
        raise ResourceNotFoundError(f"User {user_id} not found") from None

    evaluator.invalidate(user_id)
    logger.info(
        "claim_revoked" if removed else "claim_revoke_noop",
        user_id=str(user_id),
        claim_type=request.claim_type,
        revoked_by=str(caller.user_id),
    )
    return ClaimChangeResponse(
        user_id=user_id,
        claim_type=request.claim_type,
        claim_value=request.claim_value,
        changed=removed,
    )
