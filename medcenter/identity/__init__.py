"""Identity claims and claims-based authorization."""

from medcenter.identity.claims import (
    PHI_CERTIFICATIONS,
    AccessClaim,
    AdminTier,
    CallerIdentity,
    ClaimTypes,
    UserRole,
)
from medcenter.identity.policies import POLICIES, AccessPolicyEvaluator, PolicyName
from medcenter.identity.store import IdentityStore

__all__ = [
    "PHI_CERTIFICATIONS",
    "POLICIES",
    "AccessClaim",
    "AccessPolicyEvaluator",
    "AdminTier",
    "CallerIdentity",
    "ClaimTypes",
    "IdentityStore",
    "PolicyName",
    "UserRole",
]
