"""Action log pipeline configuration."""

from pydantic import BaseModel, ConfigDict, Field


class ActionLogConfig(BaseModel):
    """Settings for the in-memory queue and its drain worker.

    Read once at startup. The model is frozen so the queue capacity
    cannot change for the lifetime of the process.
    """

    model_config = ConfigDict(frozen=True)

    queue_capacity: int = Field(
        default=1000,
        gt=0,
        description="Maximum number of events buffered in memory",
    )
    batch_size: int = Field(
        default=100,
        gt=0,
        description="Maximum events persisted per store call",
    )
    persist_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single batch write",
    )
    shutdown_grace_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Time allowed for the final flush on shutdown",
    )


class AuthorizationConfig(BaseModel):
    """Claims-based policy evaluation settings."""

    model_config = ConfigDict(frozen=True)

    claims_cache_ttl_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Cache claim lookups for this long (0 disables caching)",
    )
