"""Response models for the action log endpoint."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from medcenter.audit.models import AuditEvent, AuditLogPage


class ActionLogItem(BaseModel):
    """One action log entry as returned to readers."""

    id: UUID
    action_name: str
    description: str
    user_id: UUID | None = Field(default=None, description="Actor of the action")
    payload: str | None = None
    occurred_at: datetime

    @classmethod
    def from_event(cls, event: AuditEvent) -> "ActionLogItem":
        return cls(
            id=event.id,
            action_name=event.action_name,
            description=event.description,
            user_id=event.actor_id,
            payload=event.payload,
            occurred_at=event.occurred_at,
        )


class PaginationMetadata(BaseModel):
    """Paging information accompanying a list response."""

    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous: bool
    has_next: bool


class ActionLogListResponse(BaseModel):
    """Response for GET /v1/action-logs."""

    items: list[ActionLogItem] = Field(default_factory=list)
    metadata: PaginationMetadata

    @classmethod
    def from_page(cls, page: AuditLogPage) -> "ActionLogListResponse":
        return cls(
            items=[ActionLogItem.from_event(e) for e in page.items],
            metadata=PaginationMetadata(
                page_number=page.page_number,
                page_size=page.page_size,
                total_count=page.total_count,
                total_pages=page.total_pages,
                has_previous=page.has_previous,
                has_next=page.has_next,
            ),
        )
