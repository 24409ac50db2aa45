"""
Alignment Models - Data classes for X-Matrix entities.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from ..errors import ValidationError


class ObjectiveKind(str, Enum):
    """Row families of the matrix."""

    BREAKTHROUGH = "breakthrough"  # Multi-year target
    ANNUAL = "annual"  # One-year target


class ColumnType(str, Enum):
    """Column families of the matrix."""

    METRIC = "metric"
    ACTION = "action"  # Improvement action


class Strength(str, Enum):
    """Weight of an objective-to-column link."""

    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


# absent -> strong -> medium -> weak -> absent
NEXT_STRENGTH: dict[Strength | None, Strength | None] = {
    None: Strength.STRONG,
    Strength.STRONG: Strength.MEDIUM,
    Strength.MEDIUM: Strength.WEAK,
    Strength.WEAK: None,
}


@dataclass(frozen=True)
class MetricColumn:
    """Reference to a metric column."""

    id: str
    column_type: ClassVar[ColumnType] = ColumnType.METRIC


@dataclass(frozen=True)
class ActionColumn:
    """Reference to an improvement action column."""

    id: str
    column_type: ClassVar[ColumnType] = ColumnType.ACTION


Column = MetricColumn | ActionColumn


def make_column(column_id: str, column_type: ColumnType | str) -> Column:
    """Build a tagged column reference from an id and a column type name."""
    try:
        column_type = ColumnType(column_type)
    except ValueError:
        raise ValidationError(
            f"Unknown column type '{column_type}' (expected metric or action)",
            field="column_type",
        )
    if column_type is ColumnType.METRIC:
        return MetricColumn(column_id)
    return ActionColumn(column_id)


def parse_kind(kind: ObjectiveKind | str) -> ObjectiveKind:
    """Coerce an objective kind, raising ValidationError if unknown."""
    try:
        return ObjectiveKind(kind)
    except ValueError:
        raise ValidationError(
            f"Unknown objective kind '{kind}' (expected breakthrough or annual)",
            field="kind",
        )


@dataclass
class ObjectiveNode:
    """Breakthrough or annual objective (matrix row)."""

    id: str
    kind: ObjectiveKind
    description: str

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ObjectiveNode":
        """Create from stored record."""
        return cls(
            id=data["id"],
            kind=ObjectiveKind(data["kind"]),
            description=data["description"],
        )


@dataclass
class MetricNode:
    """Measured target (matrix column)."""

    id: str
    name: str
    target: float
    unit: str

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "target": self.target,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MetricNode":
        """Create from stored record."""
        return cls(
            id=data["id"],
            name=data["name"],
            target=data.get("target", 0),
            unit=data["unit"],
        )


@dataclass
class ActionNode:
    """Improvement action (matrix column)."""

    id: str
    description: str
    owner: str

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "description": self.description,
            "owner": self.owner,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ActionNode":
        """Create from stored record."""
        return cls(id=data["id"], description=data["description"], owner=data["owner"])


@dataclass
class AlignmentLink:
    """Weighted link between an objective and one column."""

    objective_id: str
    column: Column
    strength: Strength = Strength.STRONG

    @property
    def column_type(self) -> ColumnType:
        return self.column.column_type

    def matches(self, objective_id: str, column: Column) -> bool:
        """True if this link is the one for the (objective, column) pair."""
        return self.objective_id == objective_id and self.column == column

    def to_dict(self) -> dict:
        """Convert to dictionary for storage.

        Exactly one of ``metric_id``/``action_id`` is written.
        """
        key = "metric_id" if isinstance(self.column, MetricColumn) else "action_id"
        return {
            "objective_id": self.objective_id,
            key: self.column.id,
            "strength": self.strength.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AlignmentLink":
        """Create from stored record."""
        metric_id = data.get("metric_id")
        action_id = data.get("action_id")
        if (metric_id is None) == (action_id is None):
            raise ValidationError(
                "Alignment link must reference exactly one of metric_id or action_id",
                objective_id=data.get("objective_id"),
            )
        column: Column = (
            MetricColumn(metric_id) if metric_id is not None else ActionColumn(action_id)
        )
        return cls(
            objective_id=data["objective_id"],
            column=column,
            strength=Strength(data["strength"]),
        )
