"""Tests for bearer token handling."""

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt

from medcenter.api.middleware.auth import CallerDep, get_jwt_secret

from builders import make_token


@pytest.fixture
def client(jwt_secret: str) -> TestClient:
    app = FastAPI()

    @app.get("/whoami")
    async def whoami(caller: CallerDep) -> dict:
        return {
            "user_id": str(caller.user_id) if caller.user_id else None,
            "roles": sorted(caller.roles),
        }

    return TestClient(app)


class TestGetCallerIdentity:
    """Tests for get_caller_identity."""

    def test_no_token_is_anonymous(self, client: TestClient) -> None:
        assert client.get("/whoami").json() == {"user_id": None, "roles": []}

    def test_valid_token(self, client: TestClient, jwt_secret: str) -> None:
        user = uuid4()
        token = make_token(jwt_secret, user_id=user, roles=["Doctor", "LabUser"])

        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"user_id": str(user), "roles": ["Doctor", "LabUser"]}

    def test_wrong_secret_is_401(self, client: TestClient) -> None:
        token = make_token("some-other-secret")
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_expired_token_is_401(self, client: TestClient, jwt_secret: str) -> None:
        token = make_token(jwt_secret, expires_in=timedelta(minutes=-5))
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_non_uuid_subject_is_401(self, client: TestClient, jwt_secret: str) -> None:
        token = jwt.encode({"sub": "not-a-uuid"}, jwt_secret, algorithm="HS256")
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_missing_subject_is_401(self, client: TestClient, jwt_secret: str) -> None:
        token = jwt.encode({"roles": ["Doctor"]}, jwt_secret, algorithm="HS256")
        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestGetJwtSecret:
    """Tests for get_jwt_secret."""

    def test_missing_secret_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MEDCENTER_JWT_SECRET", raising=False)
        with pytest.raises(RuntimeError):
            get_jwt_secret()
