"""
PDCA Operations - Gated phase progression for improvement cycles.
"""

import logging
from datetime import datetime

from ..common import new_id, today
from ..errors import InvalidTransitionError, NotFoundError, ValidationError, require_text
from ..store import Collection, EntityStore
from ..store.schema import INITIATIVES, PDCA_CYCLES
from .models import (
    PHASE_INFO,
    Category,
    CycleStatus,
    PDCACycle,
    PDCAPhase,
    Phase,
    parse_category,
    parse_phase,
)
from .queries import PDCAQueries

logger = logging.getLogger(__name__)


def complete_phase_in(
    items: Collection,
    cycle_id: str,
    phase: Phase,
    notes: str,
    findings: str,
    completed_date: str,
) -> tuple[Collection, PDCACycle]:
    """
    Complete ``phase`` of a cycle if it is the cycle's current phase.

    Raises:
        NotFoundError: No cycle with that id
        InvalidTransitionError: ``phase`` is not the current phase (skipping
            ahead, redoing a finished phase, or any phase after ``act``)
    """
    for index, record in enumerate(items):
        if record.get("id") != cycle_id:
            continue
        cycle = PDCACycle.from_dict(record)
        if cycle.status is CycleStatus.COMPLETED:
            raise InvalidTransitionError(
                f"Cycle '{cycle_id}' is already completed", cycle_id=cycle_id, phase=phase.value
            )
        if phase is not cycle.current_phase:
            raise InvalidTransitionError(
                f"Cannot complete '{phase.value}' while current phase is "
                f"'{cycle.current_phase.value}'",
                cycle_id=cycle_id,
                phase=phase.value,
                current_phase=cycle.current_phase.value,
            )
        setattr(
            cycle,
            phase.value,
            PDCAPhase(
                completed=True,
                completed_date=completed_date,
                notes=notes or "",
                findings=findings or "",
            ),
        )
        return items[:index] + [cycle.to_dict()] + items[index + 1 :], cycle
    raise NotFoundError(f"PDCA cycle '{cycle_id}' not found", id=cycle_id)


def _validate_date(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"Start date must be YYYY-MM-DD, got '{value}'", field="start_date")
    return value


def progress(cycle: PDCACycle) -> float:
    """Fraction of the four phases completed."""
    return cycle.progress


class PDCACycleTracker:
    """
    Plan-Do-Check-Act cycles.

    Each cycle is a four-state workflow: a phase can only be completed when
    it is the current phase, and completing ``act`` completes the cycle.
    """

    def __init__(self, store: EntityStore, enforce_references: bool = False):
        """
        Initialize the tracker.

        Args:
            store: Entity store holding the cycle collection
            enforce_references: Reject a linked initiative id missing from
                the initiatives collection (default: not checked)
        """
        self.store = store
        self.enforce_references = enforce_references
        self.queries = PDCAQueries(store)

    def create_cycle(
        self,
        title: str,
        description: str,
        category: Category | str,
        owner: str,
        start_date: str | None = None,
        linked_initiative_id: str | None = None,
    ) -> PDCACycle:
        """
        Start a new cycle in the plan phase.

        Args:
            title: Short name of the improvement
            description: Problem statement
            category: quality, cost, delivery, safety or morale
            owner: Responsible person
            start_date: YYYY-MM-DD (default: today)
            linked_initiative_id: Optional initiative this cycle supports

        Returns:
            Created PDCACycle

        Raises:
            ValidationError: Missing title/description/owner, unknown
                category or malformed start date
            NotFoundError: Unknown initiative while references are enforced
        """
        cycle = PDCACycle(
            id=new_id("pdca"),
            title=require_text(title, "title"),
            description=require_text(description, "description"),
            category=parse_category(category),
            owner=require_text(owner, "owner"),
            start_date=_validate_date(start_date) if start_date else today(),
            linked_initiative_id=linked_initiative_id or None,
        )
        if self.enforce_references and cycle.linked_initiative_id:
            known = {record.get("id") for record in self.store.get(INITIATIVES) or []}
            if cycle.linked_initiative_id not in known:
                raise NotFoundError(
                    f"Initiative '{cycle.linked_initiative_id}' not found",
                    id=cycle.linked_initiative_id,
                )

        self.store.modify(PDCA_CYCLES, lambda items: (items + [cycle.to_dict()], None))
        logger.info(f"Created PDCA cycle {cycle.id}: {cycle.title}")
        return cycle

    def complete_phase(
        self,
        cycle_id: str,
        phase: Phase | str,
        notes: str = "",
        findings: str = "",
    ) -> PDCACycle:
        """
        Complete the current phase of a cycle and advance it.

        Args:
            cycle_id: Cycle to advance
            phase: Phase being completed; must equal the current phase
            notes: What was done
            findings: What was learned

        Returns:
            The updated cycle

        Raises:
            ValidationError: Unknown phase name
            NotFoundError: Unknown cycle
            InvalidTransitionError: Phase is not the current phase
        """
        phase = parse_phase(phase)
        try:
            cycle = self.store.modify(
                PDCA_CYCLES,
                lambda items: complete_phase_in(
                    items, cycle_id, phase, notes, findings, today()
                ),
            )
        except InvalidTransitionError as e:
            logger.debug(f"Rejected phase completion: {e.message}")
            raise

        label = PHASE_INFO[phase]["label"]
        if cycle.status is CycleStatus.COMPLETED:
            logger.info(f"{label} phase completed; PDCA cycle {cycle_id} completed")
        else:
            logger.info(
                f"{label} phase completed for {cycle_id}; now in {cycle.current_phase.value}"
            )
        return cycle

    def progress(self, cycle: PDCACycle) -> float:
        """Fraction of the four phases completed."""
        return progress(cycle)

    # =========================================================================
    # Query Delegation
    # =========================================================================

    def get(self, cycle_id: str) -> PDCACycle:
        """Get a cycle by ID."""
        cycle = self.queries.get_by_id(cycle_id)
        if cycle is None:
            raise NotFoundError(f"PDCA cycle '{cycle_id}' not found", id=cycle_id)
        return cycle

    def list_cycles(self) -> list[PDCACycle]:
        return self.queries.list_all()

    def list_active(self) -> list[PDCACycle]:
        return self.queries.list_active()

    def list_completed(self) -> list[PDCACycle]:
        return self.queries.list_completed()

    def cycles_for_initiative(self, initiative_id: str) -> list[PDCACycle]:
        return self.queries.cycles_for_initiative(initiative_id)

    def summary(self) -> dict:
        return self.queries.summary()
