"""The caller's own effective permissions."""

from fastapi import APIRouter

from medcenter.api.dependencies import PolicyEvaluatorDep
from medcenter.api.middleware.auth import AuthenticatedCallerDep
from medcenter.api.models.claims import PermissionsResponse

router = APIRouter(prefix="/me")


@router.get("/permissions", response_model=PermissionsResponse, name="GetMyPermissions")
async def get_my_permissions(
    caller: AuthenticatedCallerDep,
    evaluator: PolicyEvaluatorDep,
) -> PermissionsResponse:
    """Evaluate every policy for the caller."""
    policies = await evaluator.evaluate_all(caller)
    assert caller.user_id is not None
    return PermissionsResponse(
        user_id=caller.user_id,
        roles=sorted(caller.roles),
        policies=policies,
    )
