"""
Dependency Operations - Create and resolve initiative dependencies.
"""

import logging

from ..common import new_id, now_iso
from ..errors import NotFoundError, ValidationError, require_text
from ..store import Collection, EntityStore
from ..store.schema import DEPENDENCIES, INITIATIVES
from .models import Dependency, DependencyStatus, DependencyType, parse_type
from .queries import DependencyQueries

logger = logging.getLogger(__name__)


def resolve_in(
    items: Collection, dependency_id: str, resolved_at: str
) -> tuple[Collection | None, Dependency]:
    """
    Mark a dependency resolved.

    Returns:
        (new collection, dependency). The collection is None when the
        dependency was already resolved and nothing changes.
    """
    for index, record in enumerate(items):
        if record.get("id") != dependency_id:
            continue
        dependency = Dependency.from_dict(record)
        if dependency.status is DependencyStatus.RESOLVED:
            return None, dependency
        dependency.status = DependencyStatus.RESOLVED
        dependency.resolved_at = resolved_at
        return items[:index] + [dependency.to_dict()] + items[index + 1 :], dependency
    raise NotFoundError(f"Dependency '{dependency_id}' not found", id=dependency_id)


class DependencyGraph:
    """
    Directed, typed edges between initiatives with an active -> resolved
    lifecycle.

    Any directed graph is accepted, cycles included; ``detect_cycles``
    reports them without changing what can be added.
    """

    def __init__(self, store: EntityStore, enforce_references: bool = False):
        """
        Initialize the dependency manager.

        Args:
            store: Entity store holding the dependency collection
            enforce_references: Reject initiative ids missing from the
                initiatives collection (default: not checked)
        """
        self.store = store
        self.enforce_references = enforce_references
        self.queries = DependencyQueries(store)

    def add_dependency(
        self,
        from_id: str,
        from_title: str,
        to_id: str,
        to_title: str,
        dependency_type: DependencyType | str,
        description: str,
    ) -> Dependency:
        """
        Add an active dependency from one initiative to another.

        Args:
            from_id: Source initiative
            from_title: Source title as shown now (snapshot)
            to_id: Target initiative
            to_title: Target title as shown now (snapshot)
            dependency_type: blocks, enables or informs
            description: Why the dependency exists

        Returns:
            Created Dependency

        Raises:
            ValidationError: Self-loop, missing id/description or unknown type
            NotFoundError: Unknown initiative while references are enforced
        """
        from_id = require_text(from_id, "from_initiative_id")
        to_id = require_text(to_id, "to_initiative_id")
        if from_id == to_id:
            logger.debug(f"Rejected self-loop dependency on {from_id}")
            raise ValidationError(
                "Cannot create dependency to the same initiative", initiative_id=from_id
            )
        dependency = Dependency(
            id=new_id("dep"),
            from_initiative_id=from_id,
            from_initiative_title=(from_title or "").strip(),
            to_initiative_id=to_id,
            to_initiative_title=(to_title or "").strip(),
            type=parse_type(dependency_type),
            description=require_text(description, "description"),
            status=DependencyStatus.ACTIVE,
            created_at=now_iso(),
        )
        if self.enforce_references:
            self._require_initiatives(from_id, to_id)

        self.store.modify(DEPENDENCIES, lambda items: (items + [dependency.to_dict()], None))
        logger.info(
            f"Added {dependency.type.value} dependency {dependency.id}: {from_id} -> {to_id}"
        )
        return dependency

    def resolve_dependency(self, dependency_id: str) -> Dependency:
        """
        Resolve a dependency. Resolving twice is a no-op.

        Raises:
            NotFoundError: If the dependency doesn't exist
        """

        def operation(items):
            new_items, dependency = resolve_in(items, dependency_id, now_iso())
            return new_items, (dependency, new_items is not None)

        dependency, changed = self.store.modify(DEPENDENCIES, operation)
        if changed:
            logger.info(f"Resolved dependency {dependency_id}")
        else:
            logger.debug(f"Dependency {dependency_id} already resolved")
        return dependency

    def _require_initiatives(self, *initiative_ids: str) -> None:
        known = {record.get("id") for record in self.store.get(INITIATIVES) or []}
        for initiative_id in initiative_ids:
            if initiative_id not in known:
                raise NotFoundError(
                    f"Initiative '{initiative_id}' not found", id=initiative_id
                )

    # =========================================================================
    # Query Delegation
    # =========================================================================

    def get(self, dependency_id: str) -> Dependency:
        """Get a dependency by ID."""
        dependency = self.queries.get_by_id(dependency_id)
        if dependency is None:
            raise NotFoundError(f"Dependency '{dependency_id}' not found", id=dependency_id)
        return dependency

    def list_all(self) -> list[Dependency]:
        return self.queries.list_all()

    def list_active(self, dependency_type: DependencyType | str | None = None) -> list[Dependency]:
        """Active dependencies, optionally filtered by type."""
        return self.queries.list_active(parse_type(dependency_type) if dependency_type else None)

    def list_blocking(self) -> list[Dependency]:
        """Active blocking dependencies."""
        return self.queries.list_blocking()

    def dependencies_of(self, initiative_id: str) -> dict[str, list[Dependency]]:
        return self.queries.dependencies_of(initiative_id)

    def detect_cycles(
        self, dependency_type: DependencyType | str = DependencyType.BLOCKS
    ) -> list[list[str]]:
        """Cycles among active edges of a type (read-only diagnostic)."""
        return self.queries.detect_cycles(parse_type(dependency_type))

    def summary(self) -> dict:
        return self.queries.summary()
