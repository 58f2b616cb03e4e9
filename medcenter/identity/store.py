"""IdentityStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from medcenter.identity.claims import AccessClaim


class IdentityStore(ABC):
    """Read and manage the claims attached to users."""

    @abstractmethod
    async def get_claims(self, user_id: UUID) -> list[AccessClaim] | None:
        """Get every claim of a user.

        Returns:
            The user's claims (possibly empty), or None if the user is
            unknown

        Raises:
            StorageError: If the backend read fails
        """
        pass

    @abstractmethod
    async def add_claim(self, claim: AccessClaim) -> bool:
        """Attach a claim to its subject.

        Returns:
            True if added, False if the user already had it

        Raises:
            NotFoundError: If the subject user does not exist
        """
        pass

    @abstractmethod
    async def remove_claim(self, user_id: UUID, claim_type: str, claim_value: str) -> bool:
        """Detach a claim.

        Returns:
            True if a claim was removed, False if it was not present

        Raises:
            NotFoundError: If the user does not exist
        """
        pass

    @abstractmethod
    async def user_exists(self, user_id: UUID) -> bool:
        """Check whether a user is known to the store."""
        pass
