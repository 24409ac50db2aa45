"""
PDCA Queries - Read-only views over improvement cycles.
"""

from ..store import EntityStore
from ..store.schema import PDCA_CYCLES
from .models import PHASE_ORDER, Category, CycleStatus, PDCACycle


class PDCAQueries:
    """Query interface for cycle dashboards."""

    def __init__(self, store: EntityStore):
        self.store = store

    def list_all(self) -> list[PDCACycle]:
        return [PDCACycle.from_dict(record) for record in self.store.get(PDCA_CYCLES) or []]

    def get_by_id(self, cycle_id: str) -> PDCACycle | None:
        for cycle in self.list_all():
            if cycle.id == cycle_id:
                return cycle
        return None

    def list_active(self) -> list[PDCACycle]:
        return [c for c in self.list_all() if c.status is not CycleStatus.COMPLETED]

    def list_completed(self) -> list[PDCACycle]:
        return [c for c in self.list_all() if c.status is CycleStatus.COMPLETED]

    def cycles_for_initiative(self, initiative_id: str) -> list[PDCACycle]:
        return [c for c in self.list_all() if c.linked_initiative_id == initiative_id]

    def summary(self) -> dict:
        """Get cycle statistics."""
        cycles = self.list_all()
        by_category = {category.value: 0 for category in Category}
        by_phase = {phase.value: 0 for phase in PHASE_ORDER}
        for cycle in cycles:
            by_category[cycle.category.value] += 1
            if cycle.status is not CycleStatus.COMPLETED:
                by_phase[cycle.current_phase.value] += 1

        completed = sum(1 for c in cycles if c.status is CycleStatus.COMPLETED)
        return {
            "total": len(cycles),
            "active": len(cycles) - completed,
            "completed": completed,
            "average_progress": (
                sum(c.progress for c in cycles) / len(cycles) if cycles else 0.0
            ),
            "by_category": by_category,
            "active_by_phase": by_phase,
        }
