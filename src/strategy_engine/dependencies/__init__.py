"""Dependency Graph Manager - typed edges between initiatives

Usage:
    from strategy_engine.dependencies import DependencyGraph

    graph = DependencyGraph(store)
    dep = graph.add_dependency("init-1", "ERP rollout", "init-2", "Data lake",
                               "blocks", "Needs the new chart of accounts")
    graph.list_blocking()
    graph.resolve_dependency(dep.id)
"""

from .models import Dependency, DependencyStatus, DependencyType
from .operations import DependencyGraph
from .queries import DependencyQueries, find_cycles

__all__ = [
    "DependencyGraph",
    "DependencyQueries",
    "Dependency",
    "DependencyStatus",
    "DependencyType",
    "find_cycles",
]
