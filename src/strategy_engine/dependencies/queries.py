"""
Dependency Queries - Filters and graph diagnostics over dependency edges.
"""

from collections import defaultdict

from ..store import EntityStore
from ..store.schema import DEPENDENCIES
from .models import Dependency, DependencyStatus, DependencyType


def find_cycles(edges: list[tuple[str, str]]) -> list[list[str]]:
    """
    Enumerate the elementary cycles of a directed graph.

    Each cycle is reported once, as the list of nodes along its edges
    starting from its smallest node id. Parallel edges count once.

    Args:
        edges: (source, target) pairs

    Returns:
        Cycles ordered by starting node, then lexicographically by path
    """
    graph: dict[str, set[str]] = defaultdict(set)
    for source, target in edges:
        graph[source].add(target)

    cycles: list[list[str]] = []
    for start in sorted(graph):
        # Only walk through nodes larger than start so each cycle is found
        # exactly once, from its minimum node.
        stack: list[tuple[str, list[str]]] = [(start, [start])]
        while stack:
            node, path = stack.pop()
            for successor in sorted(graph.get(node, ()), reverse=True):
                if successor == start:
                    cycles.append(list(path))
                elif successor > start and successor not in path:
                    stack.append((successor, path + [successor]))

    return sorted(cycles, key=lambda cycle: (cycle[0], cycle))


class DependencyQueries:
    """Query interface for the dependency graph."""

    def __init__(self, store: EntityStore):
        self.store = store

    # =========================================================================
    # Basic Queries
    # =========================================================================

    def list_all(self) -> list[Dependency]:
        """All dependencies in creation order."""
        return [Dependency.from_dict(record) for record in self.store.get(DEPENDENCIES) or []]

    def get_by_id(self, dependency_id: str) -> Dependency | None:
        for dependency in self.list_all():
            if dependency.id == dependency_id:
                return dependency
        return None

    def list_active(self, dependency_type: DependencyType | None = None) -> list[Dependency]:
        """Active dependencies, optionally of one type."""
        return [
            dependency
            for dependency in self.list_all()
            if dependency.is_active
            and (dependency_type is None or dependency.type is dependency_type)
        ]

    def list_blocking(self) -> list[Dependency]:
        """Active ``blocks`` dependencies."""
        return self.list_active(DependencyType.BLOCKS)

    def dependencies_of(self, initiative_id: str) -> dict[str, list[Dependency]]:
        """Edges leaving and entering an initiative."""
        dependencies = self.list_all()
        return {
            "outgoing": [d for d in dependencies if d.from_initiative_id == initiative_id],
            "incoming": [d for d in dependencies if d.to_initiative_id == initiative_id],
        }

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def detect_cycles(
        self, dependency_type: DependencyType = DependencyType.BLOCKS
    ) -> list[list[str]]:
        """
        Cycles among active edges of one type, as lists of initiative ids.

        Blocking edges are precedence constraints, so a cycle here means a
        set of initiatives that can never start. Nothing prevents creating
        one; this only reports them.
        """
        edges = [
            (d.from_initiative_id, d.to_initiative_id)
            for d in self.list_active(dependency_type)
        ]
        return find_cycles(edges)

    def summary(self) -> dict:
        """Get dependency statistics."""
        dependencies = self.list_all()
        active = [d for d in dependencies if d.is_active]
        by_type = {dependency_type.value: 0 for dependency_type in DependencyType}
        for dependency in active:
            by_type[dependency.type.value] += 1

        return {
            "total": len(dependencies),
            "active": len(active),
            "blocking": by_type[DependencyType.BLOCKS.value],
            "resolved": sum(
                1 for d in dependencies if d.status is DependencyStatus.RESOLVED
            ),
            "active_by_type": by_type,
            "blocking_cycles": len(self.detect_cycles()),
        }
