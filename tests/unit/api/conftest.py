"""Fixtures for API tests.

The app is built with create_app() but the lifespan is not run, so the
action log pipeline is never started: recorded events stay in its
queue where tests can inspect them.
"""

from collections.abc import Callable
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from medcenter.api.app import create_app
from medcenter.api.dependencies import (
    get_audit_store,
    get_identity_store,
    get_policy_evaluator,
)
from medcenter.audit.pipeline import ActionLogPipeline
from medcenter.audit.stores.inmemory import InMemoryAuditLogStore
from medcenter.config.models import ActionLogConfig
from medcenter.identity.claims import AdminTier
from medcenter.identity.policies import AccessPolicyEvaluator
from medcenter.identity.stores.inmemory import InMemoryIdentityStore

from builders import admin_tier, make_token


@pytest.fixture
def audit_store() -> InMemoryAuditLogStore:
    return InMemoryAuditLogStore()


@pytest.fixture
def identity_store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture
def pipeline(audit_store: InMemoryAuditLogStore) -> ActionLogPipeline:
    return ActionLogPipeline.from_config(ActionLogConfig(queue_capacity=100), audit_store)


@pytest.fixture
def app(
    jwt_secret: str,
    audit_store: InMemoryAuditLogStore,
    identity_store: InMemoryIdentityStore,
    pipeline: ActionLogPipeline,
) -> FastAPI:
    """Create test FastAPI app with in-memory stores."""
    app = create_app()
    evaluator = AccessPolicyEvaluator(identity_store)

    app.dependency_overrides[get_audit_store] = lambda: audit_store
    app.dependency_overrides[get_identity_store] = lambda: identity_store
    app.dependency_overrides[get_policy_evaluator] = lambda: evaluator
    app.state.action_log_pipeline = pipeline

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers(jwt_secret: str) -> Callable[..., dict[str, str]]:
    """Build an Authorization header for a user and roles."""

    def _headers(user_id: UUID, *roles: str) -> dict[str, str]:
        token = make_token(jwt_secret, user_id=user_id, roles=list(roles))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def system_admin(identity_store: InMemoryIdentityStore) -> UUID:
    """A known user holding the SystemAdmin role in tokens."""
    user = uuid4()
    identity_store.add_user(user)
    return user


@pytest.fixture
def super_admin(identity_store: InMemoryIdentityStore) -> UUID:
    """A known user with the Super admin tier claim."""
    user = uuid4()
    identity_store.add_user(user, [admin_tier(user, AdminTier.SUPER)])
    return user


@pytest.fixture
def doctor(identity_store: InMemoryIdentityStore) -> UUID:
    """A known user with no claims."""
    user = uuid4()
    identity_store.add_user(user)
    return user

