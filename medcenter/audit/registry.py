"""Explicit table of operations that produce action log entries.

Operations are keyed by the HTTP route name, so the middleware can
decide whether a request is audited with a dict lookup.
"""

from collections.abc import Iterator, Mapping


class AuditedOperationRegistry:
    """Maps operation ids to the description stored on their events."""

    def __init__(self, operations: Mapping[str, str] | None = None) -> None:
        self._operations: dict[str, str] = {}
        for operation_id, description in (operations or {}).items():
            self.register(operation_id, description)

    def register(self, operation_id: str, description: str) -> None:
        """Declare an audited operation.

        Registering the same pair twice is a no-op.

        Raises:
            ValueError: If either value is blank, or the id is already
                registered with a different description
        """
        if not operation_id or not operation_id.strip():
            raise ValueError("operation_id must not be empty")
        if not description or not description.strip():
            raise ValueError("description must not be empty")

        existing = self._operations.get(operation_id)
        if existing is not None and existing != description:
            raise ValueError(
                f"Operation '{operation_id}' already registered as '{existing}'"
            )
        self._operations[operation_id] = description

    def description_for(self, operation_id: str) -> str | None:
        return self._operations.get(operation_id)

    def __contains__(self, operation_id: object) -> bool:
        return operation_id in self._operations

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)


DEFAULT_AUDITED_OPERATIONS: dict[str, str] = {
    "GrantClaim": "Granted an access claim to a user",
    "RevokeClaim": "Revoked an access claim from a user",
}


def default_registry() -> AuditedOperationRegistry:
    """Registry pre-populated with the API's audited operations."""
    return AuditedOperationRegistry(DEFAULT_AUDITED_OPERATIONS)
