"""Unit tests for configuration Pydantic models."""

import pytest
from pydantic import ValidationError

from medcenter.config.models import (
    ActionLogConfig,
    APIConfig,
    AuthorizationConfig,
    LoggingConfig,
    PostgresConfig,
    StorageConfig,
    StoreBackendConfig,
)


class TestActionLogConfig:
    """Tests for ActionLogConfig."""

    def test_defaults(self) -> None:
        config = ActionLogConfig()
        assert config.queue_capacity == 1000
        assert config.batch_size == 100
        assert config.persist_timeout_seconds == 10.0
        assert config.shutdown_grace_seconds == 5.0

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_capacity_must_be_positive(self, capacity: int) -> None:
        with pytest.raises(ValidationError):
            ActionLogConfig(queue_capacity=capacity)

    def test_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ActionLogConfig(batch_size=0)

    def test_zero_grace_allowed(self) -> None:
        assert ActionLogConfig(shutdown_grace_seconds=0).shutdown_grace_seconds == 0

    def test_frozen(self) -> None:
        config = ActionLogConfig()
        with pytest.raises(ValidationError):
            config.queue_capacity = 5  # type: ignore[misc]


class TestAuthorizationConfig:
    """Tests for AuthorizationConfig."""

    def test_negative_ttl_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AuthorizationConfig(claims_cache_ttl_seconds=-1)


class TestAPIConfig:
    """Tests for APIConfig."""

    def test_defaults(self) -> None:
        config = APIConfig()
        assert config.cors_origins == []
        assert config.jwt_algorithm == "HS256"

    def test_origins_list(self) -> None:
        config = APIConfig(cors_origins=["https://portal.example.org"])
        assert config.cors_origins == ["https://portal.example.org"]


class TestStorageConfig:
    """Tests for storage models."""

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StoreBackendConfig(backend="redis")  # type: ignore[arg-type]

    def test_per_store_backends(self) -> None:
        config = StorageConfig(audit={"backend": "postgres"})
        assert config.audit.backend == "postgres"
        assert config.identity.backend == "inmemory"

    def test_pool_sizes_positive(self) -> None:
        with pytest.raises(ValidationError):
            PostgresConfig(min_pool_size=0)


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]

    def test_invalid_format(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")  # type: ignore[arg-type]
