"""Request and response models for claim management."""

from uuid import UUID

from pydantic import BaseModel, Field

from medcenter.identity.claims import AccessClaim


class ClaimRequest(BaseModel):
    """Body of POST and DELETE /v1/users/{user_id}/claims."""

    claim_type: str = Field(..., min_length=1, max_length=100)
    claim_value: str = Field(..., min_length=1, max_length=200)


class ClaimResponse(BaseModel):
    """A claim attached to a user."""

    claim_type: str
    claim_value: str

    @classmethod
    def from_claim(cls, claim: AccessClaim) -> "ClaimResponse":
        return cls(claim_type=claim.claim_type, claim_value=claim.claim_value)


class UserClaimsResponse(BaseModel):
    """Every claim of one user."""

    user_id: UUID
    claims: list[ClaimResponse] = Field(default_factory=list)


class ClaimChangeResponse(BaseModel):
    """Outcome of a grant or revoke."""

    user_id: UUID
    claim_type: str
    claim_value: str
    changed: bool = Field(..., description="False if the request was a no-op")


class PermissionsResponse(BaseModel):
    """Response for GET /v1/me/permissions."""

    user_id: UUID
    roles: list[str] = Field(default_factory=list)
    policies: dict[str, bool] = Field(default_factory=dict)
