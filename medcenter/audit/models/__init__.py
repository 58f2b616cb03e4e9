"""Action log domain models."""

from medcenter.audit.models.event import AuditEvent
from medcenter.audit.models.query import AuditLogFilter, AuditLogPage, validate_page

__all__ = [
    "AuditEvent",
    "AuditLogFilter",
    "AuditLogPage",
    "validate_page",
]
