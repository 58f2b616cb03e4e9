"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "postgres"]


class StoreBackendConfig(BaseModel):
    """Backend selection for a single store."""

    backend: BackendType = Field(default="inmemory", description="Backend type")


class PostgresConfig(BaseModel):
    """Connection pool settings shared by the PostgreSQL stores.

    The DSN itself comes from MEDCENTER_DATABASE_URL so credentials
    stay out of the TOML files.
    """

    min_pool_size: int = Field(default=2, gt=0, description="Connections kept open")
    max_pool_size: int = Field(default=10, gt=0, description="Maximum connections")
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default statement timeout (seconds)",
    )


class StorageConfig(BaseModel):
    """Storage configuration for every store."""

    audit: StoreBackendConfig = Field(default_factory=StoreBackendConfig)
    identity: StoreBackendConfig = Field(default_factory=StoreBackendConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
