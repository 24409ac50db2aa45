"""
Error taxonomy for the strategy state engines.

Every failure is a rejected operation: the stored collection is left exactly
as it was read. Callers that expose engine operations over another surface
can use ``to_dict()`` to build a ``{kind, message}`` error payload.
"""

from typing import Any


class StateEngineError(Exception):
    """Base class for all engine errors."""

    kind = "error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Structured error payload."""
        payload: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(StateEngineError):
    """A required field is missing or a value is invalid."""

    kind = "validation"


class InvalidTransitionError(StateEngineError):
    """A state machine was asked to move out of order."""

    kind = "invalid_transition"


class NotFoundError(StateEngineError):
    """A referenced id is absent from its collection."""

    kind = "not_found"


class ConcurrentModificationError(StateEngineError):
    """A collection changed between read and write."""

    kind = "conflict"


class SchemaVersionError(StateEngineError):
    """A stored collection was written by a newer schema than we support."""

    kind = "schema_version"


def require_text(value: str | None, field: str) -> str:
    """Return ``value`` stripped, or raise ValidationError if it is blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return str(value).strip()
