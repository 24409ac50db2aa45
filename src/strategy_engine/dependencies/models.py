"""
Dependency Models - Data classes for initiative dependency edges.
"""

from dataclasses import dataclass
from enum import Enum

from ..errors import ValidationError


class DependencyType(str, Enum):
    """How the source initiative affects the target."""

    BLOCKS = "blocks"  # Prevents progress
    ENABLES = "enables"  # Allows to proceed
    INFORMS = "informs"  # Provides information


class DependencyStatus(str, Enum):
    """Resolution lifecycle: active -> resolved, never reopened."""

    ACTIVE = "active"
    RESOLVED = "resolved"


def parse_type(dependency_type: DependencyType | str) -> DependencyType:
    """Coerce a dependency type, raising ValidationError if unknown."""
    try:
        return DependencyType(dependency_type)
    except ValueError:
        raise ValidationError(
            f"Unknown dependency type '{dependency_type}' (expected blocks, enables or informs)",
            field="type",
        )


@dataclass
class Dependency:
    """Directed, typed edge between two initiatives.

    Titles are captured when the edge is created and never re-synced.
    """

    id: str
    from_initiative_id: str
    from_initiative_title: str
    to_initiative_id: str
    to_initiative_title: str
    type: DependencyType
    description: str
    status: DependencyStatus = DependencyStatus.ACTIVE
    created_at: str | None = None
    resolved_at: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status is DependencyStatus.ACTIVE

    @property
    def is_blocking(self) -> bool:
        return self.is_active and self.type is DependencyType.BLOCKS

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "from_initiative_id": self.from_initiative_id,
            "from_initiative_title": self.from_initiative_title,
            "to_initiative_id": self.to_initiative_id,
            "to_initiative_title": self.to_initiative_title,
            "type": self.type.value,
            "description": self.description,
            "status": self.status.value,
            "created_at": self.created_at,
            "resolved_at": self.resolved_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Dependency":
        """Create from stored record."""
        return cls(
            id=data["id"],
            from_initiative_id=data["from_initiative_id"],
            from_initiative_title=data.get("from_initiative_title", ""),
            to_initiative_id=data["to_initiative_id"],
            to_initiative_title=data.get("to_initiative_title", ""),
            type=DependencyType(data["type"]),
            description=data["description"],
            status=DependencyStatus(data.get("status") or DependencyStatus.ACTIVE.value),
            created_at=data.get("created_at"),
            resolved_at=data.get("resolved_at"),
        )
