"""Named authorization policies and their evaluator.

Each policy is a pure function of the caller and the caller's current
claims. The evaluator does the one claims lookup a decision needs and
fails closed: an unknown user or a failed lookup is a denial.
"""

import time
from collections.abc import Callable, Sequence
from enum import Enum
from uuid import UUID

from medcenter.identity.claims import (
    PHI_CERTIFICATIONS,
    AccessClaim,
    AdminTier,
    CallerIdentity,
    ClaimTypes,
    UserRole,
)
from medcenter.identity.store import IdentityStore
from medcenter.observability.logging import get_logger
from medcenter.observability.metrics import POLICY_EVALUATIONS

logger = get_logger(__name__)


class PolicyName(str, Enum):
    """Registered policy names."""

    CAN_VIEW_AUDIT_LOG = "CanViewAuditLog"
    CAN_MANAGE_PRIVILEGED_ACCOUNTS = "CanManagePrivilegedAccounts"
    CAN_ACCESS_PROTECTED_HEALTH_INFORMATION = "CanAccessProtectedHealthInformation"


Policy = Callable[[CallerIdentity, Sequence[AccessClaim]], bool]


def can_view_audit_log(caller: CallerIdentity, claims: Sequence[AccessClaim]) -> bool:
    """System administrators, or anyone holding an admin tier."""
    if caller.has_role(UserRole.SYSTEM_ADMIN):
        return True
    return any(c.claim_type == ClaimTypes.ADMIN_TIER for c in claims)


def can_manage_privileged_accounts(
    caller: CallerIdentity, claims: Sequence[AccessClaim]
) -> bool:
    """Only the Super admin tier."""
    return any(
        c.claim_type == ClaimTypes.ADMIN_TIER and c.claim_value == AdminTier.SUPER
        for c in claims
    )


def can_access_protected_health_information(
    caller: CallerIdentity, claims: Sequence[AccessClaim]
) -> bool:
    """A certification on the PHI allow-list."""
    return any(
        c.claim_type == ClaimTypes.CERTIFICATION and c.claim_value in PHI_CERTIFICATIONS
        for c in claims
    )


POLICIES: dict[PolicyName, Policy] = {
    PolicyName.CAN_VIEW_AUDIT_LOG: can_view_audit_log,
    PolicyName.CAN_MANAGE_PRIVILEGED_ACCOUNTS: can_manage_privileged_accounts,
    PolicyName.CAN_ACCESS_PROTECTED_HEALTH_INFORMATION: can_access_protected_health_information,
}


class AccessPolicyEvaluator:
    """Evaluates named policies against claims from an IdentityStore.

    Claim lookups can be cached for a short TTL. With the default TTL of
    zero every decision reads the store, so revocations apply at once.
    """

    def __init__(
        self,
        identity_store: IdentityStore,
        *,
        cache_ttl_seconds: float = 0.0,
    ) -> None:
        self._store = identity_store
        self._cache_ttl = cache_ttl_seconds
        self._cache: dict[UUID, tuple[float, list[AccessClaim]]] = {}

    async def evaluate(self, policy: PolicyName | str, caller: CallerIdentity) -> bool:
        """Decide whether ``caller`` satisfies ``policy``.

        Raises:
            ValueError: If the policy name is not registered
        """
        name = self._resolve(policy)
        if not caller.is_authenticated:
            self._count(name, False)
            return False

        claims = await self._load_claims(caller.user_id)
        allowed = claims is not None and POLICIES[name](caller, claims)
        self._count(name, allowed)
        return allowed

    async def evaluate_all(self, caller: CallerIdentity) -> dict[str, bool]:
        """Evaluate every registered policy from a single claims lookup."""
        if not caller.is_authenticated:
            results = {name: False for name in POLICIES}
        else:
            claims = await self._load_claims(caller.user_id)
            results = {
                name: claims is not None and policy(caller, claims)
                for name, policy in POLICIES.items()
            }

        for name, allowed in results.items():
            self._count(name, allowed)
        return {name.value: allowed for name, allowed in results.items()}

    def invalidate(self, user_id: UUID) -> None:
        """Forget any cached claims of ``user_id``."""
        self._cache.pop(user_id, None)

    async def _load_claims(self, user_id: UUID) -> list[AccessClaim] | None:
        if self._cache_ttl > 0:
            cached = self._cache.get(user_id)
            if cached is not None and cached[0] > time.monotonic():
                return cached[1]

        try:
            claims = await self._store.get_claims(user_id)
        except Exception as e:
            logger.error(
                "claims_lookup_failed",
                user_id=str(user_id),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        if claims is None:
            logger.info("policy_user_not_found", user_id=str(user_id))
            return None

        if self._cache_ttl > 0:
            self._cache[user_id] = (time.monotonic() + self._cache_ttl, claims)
        return claims

    @staticmethod
    def _resolve(policy: PolicyName | str) -> PolicyName:
        try:
            return PolicyName(policy)
        except ValueError:
            raise ValueError(f"Unknown policy: {policy}") from None

    @staticmethod
    def _count(name: PolicyName, allowed: bool) -> None:
        POLICY_EVALUATIONS.labels(
            policy=name.value, outcome="allow" if allowed else "deny"
        ).inc()
