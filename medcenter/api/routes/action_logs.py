"""Read access to the action log."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from medcenter.api.dependencies import AuditLogStoreDep
from medcenter.api.exceptions import InvalidRequestError
from medcenter.api.middleware.auth import require_policy
from medcenter.api.models.action_logs import ActionLogListResponse
from medcenter.audit.models import AuditLogFilter
from medcenter.identity.claims import CallerIdentity
from medcenter.identity.policies import PolicyName
from medcenter.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/action-logs")


@router.get("", response_model=ActionLogListResponse, name="ListActionLogs")
async def list_action_logs(
    caller: Annotated[
        CallerIdentity, Depends(require_policy(PolicyName.CAN_VIEW_AUDIT_LOG))
    ],
    audit_store: AuditLogStoreDep,
    page_number: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    user_id: UUID | None = None,
    action_name: str | None = None,
) -> ActionLogListResponse:
    """List action log entries, most recent first.

    All filters are optional and combine with AND. Date bounds are
    inclusive; dates without a timezone are read as UTC.
    """
    try:
        filters = AuditLogFilter(
            start_date=start_date,
            end_date=end_date,
            actor_id=user_id,
            action_name=action_name,
        )
    except ValidationError as e:
        raise InvalidRequestError(e.errors()[0]["msg"]) from None

    page = await audit_store.query(filters, page_number=page_number, page_size=page_size)

    logger.debug(
        "action_logs_listed",
        caller_id=str(caller.user_id),
        page_number=page_number,
        total_count=page.total_count,
    )
    return ActionLogListResponse.from_page(page)
