"""
Alignment Queries - Read-only views over the X-Matrix collections.
"""

from ..store import EntityStore
from ..store.schema import (
    ACTIONS,
    ALIGNMENT_LINKS,
    ANNUAL_OBJECTIVES,
    BREAKTHROUGH_OBJECTIVES,
    METRICS,
)
from .models import (
    ActionNode,
    AlignmentLink,
    ColumnType,
    MetricNode,
    ObjectiveKind,
    ObjectiveNode,
    Strength,
)


class AlignmentQueries:
    """Query interface for matrix display and integrity checks."""

    def __init__(self, store: EntityStore):
        self.store = store

    # =========================================================================
    # Basic Queries
    # =========================================================================

    def list_objectives(self, kind: ObjectiveKind | None = None) -> list[ObjectiveNode]:
        """Breakthrough objectives first, then annual ones."""
        names = {
            ObjectiveKind.BREAKTHROUGH: BREAKTHROUGH_OBJECTIVES,
            ObjectiveKind.ANNUAL: ANNUAL_OBJECTIVES,
        }
        objectives: list[ObjectiveNode] = []
        for objective_kind, name in names.items():
            if kind is not None and objective_kind is not kind:
                continue
            objectives.extend(
                ObjectiveNode.from_dict(record) for record in self.store.get(name) or []
            )
        return objectives

    def list_metrics(self) -> list[MetricNode]:
        return [MetricNode.from_dict(record) for record in self.store.get(METRICS) or []]

    def list_actions(self) -> list[ActionNode]:
        return [ActionNode.from_dict(record) for record in self.store.get(ACTIONS) or []]

    def list_links(self) -> list[AlignmentLink]:
        return [
            AlignmentLink.from_dict(record)
            for record in self.store.get(ALIGNMENT_LINKS) or []
        ]

    def objective_ids(self) -> set[str]:
        return {objective.id for objective in self.list_objectives()}

    def column_ids(self, column_type: ColumnType) -> set[str]:
        if column_type is ColumnType.METRIC:
            return {metric.id for metric in self.list_metrics()}
        return {action.id for action in self.list_actions()}

    # =========================================================================
    # Integrity Queries
    # =========================================================================

    def dangling_links(self) -> list[AlignmentLink]:
        """
        Find links whose objective or column no longer exists.

        Removing a row or column never cascades to its links, so these are
        expected; the matrix view simply doesn't render them.
        """
        objective_ids = self.objective_ids()
        column_ids = {
            ColumnType.METRIC: self.column_ids(ColumnType.METRIC),
            ColumnType.ACTION: self.column_ids(ColumnType.ACTION),
        }
        return [
            link
            for link in self.list_links()
            if link.objective_id not in objective_ids
            or link.column.id not in column_ids[link.column_type]
        ]

    def summary(self) -> dict:
        """Get matrix statistics."""
        links = self.list_links()
        by_strength = {strength.value: 0 for strength in Strength}
        for link in links:
            by_strength[link.strength.value] += 1

        return {
            "breakthrough_objectives": len(self.list_objectives(ObjectiveKind.BREAKTHROUGH)),
            "annual_objectives": len(self.list_objectives(ObjectiveKind.ANNUAL)),
            "metrics": len(self.list_metrics()),
            "actions": len(self.list_actions()),
            "links": len(links),
            "by_strength": by_strength,
            "dangling_links": len(self.dangling_links()),
        }
