"""PostgreSQL implementation of IdentityStore."""

from uuid import UUID

from medcenter.db.errors import NotFoundError, StorageError
from medcenter.db.pool import PostgresPool
from medcenter.identity.claims import AccessClaim
from medcenter.identity.store import IdentityStore
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresIdentityStore(IdentityStore):
    """PostgreSQL-backed claims lookup.

    Users live in ``identity_users``; claims in ``identity_user_claims``
    with a unique (user_id, claim_type, claim_value) constraint.
    """

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def user_exists(self, user_id: UUID) -> bool:
        async with self._pool.acquire() as conn:
            return bool(
                await conn.fetchval(
                    "SELECT EXISTS(SELECT 1 FROM identity_users WHERE id = $1)", user_id
                )
            )

    async def get_claims(self, user_id: UUID) -> list[AccessClaim] | None:
        try:
            async with self._pool.acquire() as conn:
                exists = await conn.fetchval(
                    "SELECT EXISTS(SELECT 1 FROM identity_users WHERE id = $1)", user_id
                )
                if not exists:
                    return None
                rows = await conn.fetch(
                    """
                    SELECT claim_type, claim_value
                    FROM identity_user_claims
                    WHERE user_id = $1
                    ORDER BY id
                    """,
                    user_id,
                )
        except StorageError as e:
            logger.error("postgres_get_claims_failed", user_id=str(user_id), error=str(e))
            raise

        return [
            AccessClaim(
                subject_id=user_id,
                claim_type=row["claim_type"],
                claim_value=row["claim_value"],
            )
            for row in rows
        ]

    async def add_claim(self, claim: AccessClaim) -> bool:
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                exists = await conn.fetchval(
                    "SELECT EXISTS(SELECT 1 FROM identity_users WHERE id = $1)",
                    claim.subject_id,
                )
                if not exists:
                    raise NotFoundError(f"User {claim.subject_id} not found")
                status = await conn.execute(
                    """
                    INSERT INTO identity_user_claims (user_id, claim_type, claim_value)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (user_id, claim_type, claim_value) DO NOTHING
                    """,
                    claim.subject_id,
                    claim.claim_type,
                    claim.claim_value,
                )

        added = status == "INSERT 0 1"
        logger.debug(
            "claim_added" if added else "claim_already_present",
            user_id=str(claim.subject_id),
            claim_type=claim.claim_type,
        )
        return added

    async def remove_claim(self, user_id: UUID, claim_type: str, claim_value: str) -> bool:
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                exists = await conn.fetchval(
                    "SELECT EXISTS(SELECT 1 FROM identity_users WHERE id = $1)", user_id
                )
                if not exists:
                    raise NotFoundError(f"User {user_id} not found")
                status = await conn.execute(
                    """
                    DELETE FROM identity_user_claims
                    WHERE user_id = $1 AND claim_type = $2 AND claim_value = $3
                    """,
                    user_id,
                    claim_type,
                    claim_value,
                )

        removed = status != "DELETE 0"
        logger.debug(
            "claim_removed" if removed else "claim_not_present",
            user_id=str(user_id),
            claim_type=claim_type,
        )
        return removed
