"""In-memory implementation of IdentityStore."""

from uuid import UUID

from medcenter.db.errors import NotFoundError
from medcenter.identity.claims import AccessClaim
from medcenter.identity.store import IdentityStore


class InMemoryIdentityStore(IdentityStore):
    """In-memory IdentityStore for testing and development.

    Claims are kept per user in insertion order.
    """

    def __init__(self) -> None:
        self._claims: dict[UUID, list[AccessClaim]] = {}

    def add_user(self, user_id: UUID, claims: list[AccessClaim] | None = None) -> None:
        """Register a user, optionally with initial claims."""
        self._claims.setdefault(user_id, [])
        for claim in claims or []:
            if claim.subject_id != user_id:
                raise ValueError("claim subject does not match user_id")
            if claim not in self._claims[user_id]:
                self._claims[user_id].append(claim)

    async def user_exists(self, user_id: UUID) -> bool:
        return user_id in self._claims

    async def get_claims(self, user_id: UUID) -> list[AccessClaim] | None:
        claims = self._claims.get(user_id)
        return list(claims) if claims is not None else None

    async def add_claim(self, claim: AccessClaim) -> bool:
        claims = self._claims.get(claim.subject_id)
        if claims is None:
            raise NotFoundError(f"User {claim.subject_id} not found")
        if claim in claims:
            return False
        claims.append(claim)
        return True

    async def remove_claim(self, user_id: UUID, claim_type: str, claim_value: str) -> bool:
        claims = self._claims.get(user_id)
        if claims is None:
            raise NotFoundError(f"User {user_id} not found")
        target = AccessClaim(subject_id=user_id, claim_type=claim_type, claim_value=claim_value)
        if target not in claims:
            return False
        claims.remove(target)
        return True
