"""Tests for InMemoryIdentityStore."""

from uuid import uuid4

import pytest

from medcenter.db.errors import NotFoundError
from medcenter.identity.claims import AdminTier, ClaimTypes
from medcenter.identity.stores import InMemoryIdentityStore

from builders import admin_tier, certification


@pytest.fixture
def store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


class TestGetClaims:
    """Tests for get_claims."""

    async def test_unknown_user_is_none(self, store: InMemoryIdentityStore) -> None:
        assert await store.get_claims(uuid4()) is None

    async def test_known_user_without_claims_is_empty(self, store: InMemoryIdentityStore) -> None:
        user = uuid4()
        store.add_user(user)
        assert await store.get_claims(user) == []
        assert await store.user_exists(user)

    async def test_returns_copy(self, store: InMemoryIdentityStore) -> None:
        user = uuid4()
        store.add_user(user, [certification(user, "HIPAA")])

        claims = await store.get_claims(user)
        assert claims is not None
        claims.clear()
        assert len(await store.get_claims(user) or []) == 1

    def test_add_user_rejects_foreign_claims(self, store: InMemoryIdentityStore) -> None:
        with pytest.raises(ValueError):
            store.add_user(uuid4(), [certification(uuid4(), "HIPAA")])


class TestAddClaim:
    """Tests for add_claim."""

    async def test_add_new_claim(self, store: InMemoryIdentityStore) -> None:
        user = uuid4()
        store.add_user(user)

        assert await store.add_claim(admin_tier(user, AdminTier.SUPER)) is True
        assert await store.get_claims(user) == [admin_tier(user, AdminTier.SUPER)]

    async def test_duplicate_claim_returns_false(self, store: InMemoryIdentityStore) -> None:
        user = uuid4()
        store.add_user(user, [admin_tier(user, AdminTier.SUPER)])
        assert await store.add_claim(admin_tier(user, AdminTier.SUPER)) is False

    async def test_unknown_user_raises(self, store: InMemoryIdentityStore) -> None:
        with pytest.raises(NotFoundError):
            await store.add_claim(admin_tier(uuid4(), AdminTier.SUPER))


class TestRemoveClaim:
    """Tests for remove_claim."""

    async def test_remove_existing_claim(self, store: InMemoryIdentityStore) -> None:
        user = uuid4()
        store.add_user(user, [admin_tier(user, AdminTier.SUPER)])

        assert await store.remove_claim(user, ClaimTypes.ADMIN_TIER, AdminTier.SUPER) is True
        assert await store.get_claims(user) == []

    async def test_remove_missing_claim_returns_false(self, store: InMemoryIdentityStore) -> None:
        user = uuid4()
        store.add_user(user)
        assert await store.remove_claim(user, ClaimTypes.ADMIN_TIER, AdminTier.SUPER) is False

    async def test_unknown_user_raises(self, store: InMemoryIdentityStore) -> None:
        with pytest.raises(NotFoundError):
            await store.remove_claim(uuid4(), ClaimTypes.ADMIN_TIER, AdminTier.SUPER)
