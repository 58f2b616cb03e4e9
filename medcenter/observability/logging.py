"""Structured logging configuration using structlog.

JSON output for production and a colored console renderer for
development. Every event passes through a redaction processor so that
credentials and patient identifiers never reach the log sink.
"""

import re
import sys
from collections.abc import Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

REDACTED = "[REDACTED]"

# Compared against keys lower-cased with "_" and "-" stripped
SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "passwordhash",
    "currentpassword",
    "newpassword",
    "secret",
    "jwtsecret",
    "token",
    "accesstoken",
    "refreshtoken",
    "authorization",
    "bearer",
    "apikey",
    "credentials",
    "creditcard",
    "cardnumber",
    "cvv",
    "ssn",
    "nationalid",
    "email",
    "phone",
    "phonenumber",
    "dateofbirth",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
SSN_PATTERN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")
BEARER_PATTERN = re.compile(r"(?i)bearer\s+[a-z0-9._~+/=-]+")

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


def normalize_key(key: str) -> str:
    """Fold a field name so camelCase and snake_case variants compare equal."""
    return key.lower().replace("_", "").replace("-", "")


class PIIRedactor:
    """structlog processor that masks sensitive values.

    Keys are matched by their normalized name; string values are scanned
    for e-mail addresses, SSNs and bearer tokens that slipped into free
    text (exception messages, descriptions).
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {
                key: REDACTED
                if isinstance(key, str) and normalize_key(key) in SENSITIVE_KEYS
                else self._redact(item)
                for key, item in value.items()
            }
        if isinstance(value, list | tuple):
            return [self._redact(item) for item in value]
        if isinstance(value, str):
            return self._redact_string(value)
        return value

    @staticmethod
    def _redact_string(value: str) -> str:
        value = BEARER_PATTERN.sub("Bearer [TOKEN]", value)
        value = EMAIL_PATTERN.sub("[EMAIL]", value)
        return SSN_PATTERN.sub("[SSN]", value)


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" for production, "console" for development
        redact_pii: Whether to mask sensitive fields before rendering
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if redact_pii:
        processors.append(PIIRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            LEVELS.get(level.upper(), 20)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to the given module name."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
