"""Filter and page models for reading the action log."""

import math
from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from medcenter.audit.models.event import AuditEvent


class AuditLogFilter(BaseModel):
    """Optional, independently combinable filters.

    Date bounds are inclusive. Naive datetimes are read as UTC and a
    blank action name means no action filter.
    """

    model_config = ConfigDict(frozen=True)

    start_date: datetime | None = None
    end_date: datetime | None = None
    actor_id: UUID | None = None
    action_name: str | None = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_validator("action_name")
    @classmethod
    def _blank_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_range(self) -> "AuditLogFilter":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def matches(self, event: AuditEvent) -> bool:
        """Whether ``event`` satisfies every filter that is set."""
        if self.start_date is not None and event.occurred_at < self.start_date:
            return False
        if self.end_date is not None and event.occurred_at > self.end_date:
            return False
        if self.actor_id is not None and event.actor_id != self.actor_id:
            return False
        if self.action_name is not None and event.action_name != self.action_name:
            return False
        return True


class AuditLogPage(BaseModel):
    """One page of action log entries, most recent first."""

    items: list[AuditEvent] = Field(default_factory=list)
    page_number: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_count: int = Field(..., ge=0)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


def validate_page(page_number: int, page_size: int) -> None:
    """Reject non-positive page arguments.

    Raises:
        ValueError: If page_number or page_size is below 1
    """
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1, got {page_number}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
