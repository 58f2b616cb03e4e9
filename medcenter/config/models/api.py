"""HTTP API configuration."""

from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    """API server configuration."""

    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Allow credentials on cross-origin requests",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Algorithm used to verify session tokens",
    )
