"""Relationship Matrix Engine - Hoshin Kanri X-Matrix alignment

Links two row families (breakthrough and annual objectives) to two column
families (metrics and improvement actions). Each link carries a strength
that cycles absent -> strong -> medium -> weak -> absent on repeated toggles.

Usage:
    from strategy_engine.alignment import RelationshipMatrix

    matrix = RelationshipMatrix(store)
    objective = matrix.add_objective("breakthrough", "Grow revenue 20%")
    metric = matrix.add_metric("Revenue", 20, "%")
    matrix.toggle_link(objective.id, metric.id, "metric")  # strong
"""

from .models import (
    ActionColumn,
    ActionNode,
    AlignmentLink,
    Column,
    ColumnType,
    MetricColumn,
    MetricNode,
    ObjectiveKind,
    ObjectiveNode,
    Strength,
    make_column,
)
from .operations import RelationshipMatrix
from .queries import AlignmentQueries

__all__ = [
    "RelationshipMatrix",
    "AlignmentQueries",
    "ObjectiveNode",
    "MetricNode",
    "ActionNode",
    "AlignmentLink",
    "Column",
    "MetricColumn",
    "ActionColumn",
    "ColumnType",
    "ObjectiveKind",
    "Strength",
    "make_column",
]
