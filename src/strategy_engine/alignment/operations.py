"""
Alignment Operations - X-Matrix mutations.

The module-level functions are pure: they take the current collection and
return the next one. ``RelationshipMatrix`` wraps them in compare-and-swap
read-modify-writes against the entity store.
"""

import logging
import math
from numbers import Real

from ..common import new_id
from ..errors import NotFoundError, ValidationError, require_text
from ..store import Collection, EntityStore
from ..store.schema import (
    ACTIONS,
    ALIGNMENT_LINKS,
    ANNUAL_OBJECTIVES,
    BREAKTHROUGH_OBJECTIVES,
    METRICS,
)
from .models import (
    NEXT_STRENGTH,
    ActionNode,
    AlignmentLink,
    Column,
    ColumnType,
    MetricNode,
    ObjectiveKind,
    ObjectiveNode,
    Strength,
    make_column,
    parse_kind,
)
from .queries import AlignmentQueries

logger = logging.getLogger(__name__)

OBJECTIVE_COLLECTIONS: dict[ObjectiveKind, str] = {
    ObjectiveKind.BREAKTHROUGH: BREAKTHROUGH_OBJECTIVES,
    ObjectiveKind.ANNUAL: ANNUAL_OBJECTIVES,
}

COLUMN_COLLECTIONS: dict[ColumnType, str] = {
    ColumnType.METRIC: METRICS,
    ColumnType.ACTION: ACTIONS,
}


# =============================================================================
# Pure collection functions
# =============================================================================


def find_link(links: Collection, objective_id: str, column: Column) -> AlignmentLink | None:
    """Return the link for an (objective, column) pair, if any."""
    for record in links:
        link = AlignmentLink.from_dict(record)
        if link.matches(objective_id, column):
            return link
    return None


def toggle_link(
    links: Collection, objective_id: str, column: Column
) -> tuple[Collection, AlignmentLink | None]:
    """
    Advance the link for a pair one step around absent/strong/medium/weak.

    Returns:
        (new links collection, resulting link or None when removed)
    """
    for index, record in enumerate(links):
        link = AlignmentLink.from_dict(record)
        if not link.matches(objective_id, column):
            continue
        next_strength = NEXT_STRENGTH[link.strength]
        if next_strength is None:
            return links[:index] + links[index + 1 :], None
        updated = AlignmentLink(objective_id, column, next_strength)
        return links[:index] + [updated.to_dict()] + links[index + 1 :], updated

    created = AlignmentLink(objective_id, column, Strength.STRONG)
    return links + [created.to_dict()], created


def remove_record(items: Collection, record_id: str, label: str) -> tuple[Collection, dict]:
    """Drop the record with ``record_id``; NotFoundError if absent."""
    for index, record in enumerate(items):
        if record.get("id") == record_id:
            return items[:index] + items[index + 1 :], record
    raise NotFoundError(f"{label} '{record_id}' not found", id=record_id)


def validate_target(target) -> float:
    """Metric targets must be finite real numbers."""
    if isinstance(target, bool) or not isinstance(target, Real):
        raise ValidationError(f"Metric target must be a number, got {target!r}", field="target")
    if not math.isfinite(target):
        raise ValidationError(f"Metric target must be finite, got {target!r}", field="target")
    return target


class RelationshipMatrix:
    """
    Hoshin Kanri X-Matrix: objectives (rows) linked to metrics and
    improvement actions (columns) with a cyclable strength.
    """

    def __init__(self, store: EntityStore, enforce_references: bool = False):
        """
        Initialize the matrix engine.

        Args:
            store: Entity store holding the matrix collections
            enforce_references: Reject links whose objective or column id
                does not exist (default: dangling links are tolerated)
        """
        self.store = store
        self.enforce_references = enforce_references
        self.queries = AlignmentQueries(store)

    # =========================================================================
    # Rows and columns
    # =========================================================================

    def add_objective(self, kind: ObjectiveKind | str, description: str) -> ObjectiveNode:
        """Append a breakthrough or annual objective."""
        kind = parse_kind(kind)
        objective = ObjectiveNode(
            id=new_id("obj"),
            kind=kind,
            description=require_text(description, "description"),
        )
        self.store.modify(
            OBJECTIVE_COLLECTIONS[kind],
            lambda items: (items + [objective.to_dict()], None),
        )
        logger.info(f"Added {kind.value} objective {objective.id}")
        return objective

    def update_objective(self, objective_id: str, description: str) -> ObjectiveNode:
        """Change an objective's description (its only mutable field)."""
        description = require_text(description, "description")
        kind = self._objective_kind(objective_id)

        def operation(items: Collection):
            updated = None
            result = []
            for record in items:
                if record.get("id") == objective_id:
                    updated = ObjectiveNode.from_dict({**record, "description": description})
                    record = updated.to_dict()
                result.append(record)
            if updated is None:
                raise NotFoundError(f"Objective '{objective_id}' not found", id=objective_id)
            return result, updated

        return self.store.modify(OBJECTIVE_COLLECTIONS[kind], operation)

    def remove_objective(self, objective_id: str) -> ObjectiveNode:
        """Remove an objective. Its links are left in place."""
        kind = self._objective_kind(objective_id)
        record = self.store.modify(
            OBJECTIVE_COLLECTIONS[kind],
            lambda items: remove_record(items, objective_id, "Objective"),
        )
        logger.info(f"Removed objective {objective_id}")
        return ObjectiveNode.from_dict(record)

    def add_metric(self, name: str, target: float, unit: str) -> MetricNode:
        """Append a metric column."""
        metric = MetricNode(
            id=new_id("metric"),
            name=require_text(name, "name"),
            target=validate_target(target),
            unit=require_text(unit, "unit"),
        )
        self.store.modify(METRICS, lambda items: (items + [metric.to_dict()], None))
        logger.info(f"Added metric {metric.id}")
        return metric

    def remove_metric(self, metric_id: str) -> MetricNode:
        """Remove a metric. Its links are left in place."""
        record = self.store.modify(
            METRICS, lambda items: remove_record(items, metric_id, "Metric")
        )
        logger.info(f"Removed metric {metric_id}")
        return MetricNode.from_dict(record)

    def add_action(self, description: str, owner: str) -> ActionNode:
        """Append an improvement action column."""
        action = ActionNode(
            id=new_id("imp"),
            description=require_text(description, "description"),
            owner=require_text(owner, "owner"),
        )
        self.store.modify(ACTIONS, lambda items: (items + [action.to_dict()], None))
        logger.info(f"Added improvement action {action.id}")
        return action

    def remove_action(self, action_id: str) -> ActionNode:
        """Remove an improvement action. Its links are left in place."""
        record = self.store.modify(
            ACTIONS, lambda items: remove_record(items, action_id, "Improvement action")
        )
        logger.info(f"Removed improvement action {action_id}")
        return ActionNode.from_dict(record)

    # =========================================================================
    # Links
    # =========================================================================

    def toggle_link(
        self, objective_id: str, column_id: str, column_type: ColumnType | str
    ) -> AlignmentLink | None:
        """
        Cycle the link for an (objective, column) pair.

        absent -> strong -> medium -> weak -> absent. Four identical calls
        return the pair to where it started.

        Returns:
            The link after the call, or None if it was removed
        """
        column = make_column(column_id, column_type)
        if self.enforce_references:
            self._require_exists(objective_id, column)

        link = self.store.modify(
            ALIGNMENT_LINKS,
            lambda links: toggle_link(links, objective_id, column),
        )
        strength = link.strength.value if link else "none"
        logger.info(
            f"Toggled link {objective_id} -> {column.column_type.value}:{column.id} ({strength})"
        )
        return link

    def get_strength(
        self, objective_id: str, column_id: str, column_type: ColumnType | str
    ) -> Strength | None:
        """Strength of the link for a pair, or None if absent."""
        column = make_column(column_id, column_type)
        link = find_link(self.store.get(ALIGNMENT_LINKS) or [], objective_id, column)
        return link.strength if link else None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _objective_kind(self, objective_id: str) -> ObjectiveKind:
        for objective in self.queries.list_objectives():
            if objective.id == objective_id:
                return objective.kind
        raise NotFoundError(f"Objective '{objective_id}' not found", id=objective_id)

    def _require_exists(self, objective_id: str, column: Column) -> None:
        if objective_id not in self.queries.objective_ids():
            raise NotFoundError(f"Objective '{objective_id}' not found", id=objective_id)
        if column.id not in self.queries.column_ids(column.column_type):
            raise NotFoundError(
                f"{column.column_type.value.capitalize()} '{column.id}' not found",
                id=column.id,
            )

    # =========================================================================
    # Query Delegation
    # =========================================================================

    def list_objectives(self, kind: ObjectiveKind | str | None = None) -> list[ObjectiveNode]:
        """List objectives, optionally of one kind."""
        return self.queries.list_objectives(parse_kind(kind) if kind else None)

    def list_metrics(self) -> list[MetricNode]:
        """List metrics."""
        return self.queries.list_metrics()

    def list_actions(self) -> list[ActionNode]:
        """List improvement actions."""
        return self.queries.list_actions()

    def list_links(self) -> list[AlignmentLink]:
        """List all links."""
        return self.queries.list_links()

    def dangling_links(self) -> list[AlignmentLink]:
        """Links that reference a removed objective or column."""
        return self.queries.dangling_links()

    def summary(self) -> dict:
        """Matrix statistics."""
        return self.queries.summary()
