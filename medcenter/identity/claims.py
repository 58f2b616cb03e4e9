"""Claims and roles used for access decisions.

Roles travel in the signed bearer token. Claims live in the identity
store and are looked up per decision, so a revoked claim takes effect
without reissuing tokens.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClaimTypes:
    """Well-known claim type identifiers."""

    ADMIN_TIER = "medcenter.admin_tier"
    DEPARTMENT = "medcenter.department"
    CERTIFICATION = "medcenter.certification"


class AdminTier:
    """Values of the admin-tier claim."""

    SUPER = "Super"
    STANDARD = "Standard"


# Certifications that grant access to protected health information
PHI_CERTIFICATIONS: frozenset[str] = frozenset({"HIPAA", "PHI-Access"})


class UserRole(str, Enum):
    """Roles a token may carry."""

    SYSTEM_ADMIN = "SystemAdmin"
    PATIENT = "Patient"
    DOCTOR = "Doctor"
    HEALTHCARE_STAFF = "HealthcareStaff"
    LAB_USER = "LabUser"
    IMAGING_USER = "ImagingUser"


class AccessClaim(BaseModel):
    """A single (type, value) assertion attached to a user."""

    model_config = ConfigDict(frozen=True)

    subject_id: UUID = Field(..., description="User the claim belongs to")
    claim_type: str = Field(..., min_length=1, max_length=100)
    claim_value: str = Field(..., min_length=1, max_length=200)

    @field_validator("claim_type", "claim_value")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty or whitespace")
        return value


class CallerIdentity(BaseModel):
    """Who is making the current request, as read from the token."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID | None = None
    roles: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_role(self, role: UserRole | str) -> bool:
        name = role.value if isinstance(role, UserRole) else role
        return name in self.roles

    @classmethod
    def anonymous(cls) -> "CallerIdentity":
        return cls()
