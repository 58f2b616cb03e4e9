"""AuditEvent model for the action log."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from medcenter.audit.payload import MAX_PAYLOAD_LENGTH, serialize_payload


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class AuditEvent(BaseModel):
    """Immutable record of one completed, authorized action.

    Events are built in the request path right after the action
    succeeds, then handed to the action log queue. Nothing in the
    application updates or deletes them afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    action_name: str = Field(
        ..., max_length=100, description="Short action identifier, e.g. CreateUser"
    )
    description: str = Field(
        ..., max_length=500, description="Human-readable summary of the action"
    )
    actor_id: UUID | None = Field(
        default=None, description="User who performed the action; None for system actions"
    )
    payload: str | None = Field(
        default=None,
        max_length=MAX_PAYLOAD_LENGTH,
        description="Redacted JSON snapshot of the triggering request",
    )
    occurred_at: datetime = Field(
        default_factory=utc_now, description="When the event was created (UTC)"
    )

    @field_validator("action_name", "description")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty or whitespace")
        return value

    @field_validator("occurred_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @classmethod
    def create(
        cls,
        action_name: str,
        description: str,
        actor_id: UUID | None = None,
        payload: Any = None,
    ) -> "AuditEvent":
        """Build a new event stamped with a fresh id and the current time.

        The payload may be a string or any JSON-serializable structure;
        it is redacted and capped before being stored on the event.

        Raises:
            pydantic.ValidationError: If action_name or description is
                empty or whitespace
        """
        return cls(
            action_name=action_name,
            description=description,
            actor_id=actor_id,
            payload=serialize_payload(payload),
        )
