"""Request payload snapshots for action log entries.

A snapshot is the JSON form of the request that triggered an action,
with credentials and identifiers replaced by a marker and the text
capped so a single entry never exceeds the storage column.
"""

import json
from collections.abc import Mapping
from typing import Any

from medcenter.observability.logging import get_logger, normalize_key

logger = get_logger(__name__)

MAX_PAYLOAD_LENGTH = 10_000
TRUNCATION_SUFFIX = "... [truncated]"
REDACTED = "[REDACTED]"

# Normalized (lower-case, no "_" or "-") field names whose values are never stored
SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "password",
    "passwordhash",
    "currentpassword",
    "newpassword",
    "token",
    "accesstoken",
    "refreshtoken",
    "creditcard",
    "cardnumber",
    "cvv",
    "ssn",
    "nationalid",
})


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with sensitive fields masked at any depth."""
    if isinstance(value, Mapping):
        return {
            key: REDACTED if normalize_key(str(key)) in SENSITIVE_FIELDS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [redact(item) for item in value]
    return value


def truncate(text: str, limit: int = MAX_PAYLOAD_LENGTH) -> str:
    """Cut ``text`` so that, suffix included, it is at most ``limit`` characters."""
    if len(text) <= limit:
        return text
    return text[: limit - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def serialize_payload(data: Any) -> str | None:
    """Build the stored snapshot for a request payload.

    Args:
        data: A mapping or sequence, a JSON string, any other string,
            or None

    Returns:
        Compact redacted JSON (or the raw string when it is not JSON),
        capped at MAX_PAYLOAD_LENGTH characters; None for no payload
        or for one that cannot be encoded (non-string keys, cycles)
    """
    if data is None:
        return None

    if isinstance(data, str | bytes):
        text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
        try:
            data = json.loads(text)
        except (ValueError, RecursionError):
            return truncate(text)

    try:
        encoded = json.dumps(redact(data), separators=(",", ":"), default=str)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning(
            "action_log_payload_unserializable",
            payload_type=type(data).__name__,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None
    return truncate(encoded)
