"""
PDCA Models - Data classes for Plan-Do-Check-Act improvement cycles.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..errors import ValidationError


class Phase(str, Enum):
    """The four PDCA phases, completed strictly in this order."""

    PLAN = "plan"
    DO = "do"
    CHECK = "check"
    ACT = "act"


PHASE_ORDER: list[Phase] = [Phase.PLAN, Phase.DO, Phase.CHECK, Phase.ACT]

PHASE_INFO: dict[Phase, dict] = {
    Phase.PLAN: {
        "label": "Plan",
        "description": "Identify the problem and plan the improvement",
        "order": 1,
    },
    Phase.DO: {
        "label": "Do",
        "description": "Implement the plan on a small scale",
        "order": 2,
    },
    Phase.CHECK: {
        "label": "Check",
        "description": "Study the results and measure effectiveness",
        "order": 3,
    },
    Phase.ACT: {
        "label": "Act",
        "description": "Standardize and implement full-scale",
        "order": 4,
    },
}


class CycleStatus(str, Enum):
    """Cycle-level status, derived from the act phase."""

    ON_TRACK = "on-track"
    COMPLETED = "completed"


class Category(str, Enum):
    """Lean improvement categories."""

    QUALITY = "quality"
    COST = "cost"
    DELIVERY = "delivery"
    SAFETY = "safety"
    MORALE = "morale"


def parse_phase(phase: Phase | str) -> Phase:
    """Coerce a phase name, raising ValidationError if unknown."""
    try:
        return Phase(phase)
    except ValueError:
        raise ValidationError(
            f"Unknown phase '{phase}' (expected plan, do, check or act)", field="phase"
        )


def parse_category(category: Category | str) -> Category:
    """Coerce a category, raising ValidationError if unknown."""
    try:
        return Category(category)
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError(
            f"Unknown category '{category}' (expected one of {allowed})", field="category"
        )


@dataclass
class PDCAPhase:
    """Evidence recorded for one phase."""

    completed: bool = False
    completed_date: str | None = None
    notes: str = ""
    findings: str = ""

    def to_dict(self) -> dict:
        data = {
            "completed": self.completed,
            "notes": self.notes,
            "findings": self.findings,
        }
        if self.completed_date is not None:
            data["completed_date"] = self.completed_date
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> "PDCAPhase":
        data = data or {}
        return cls(
            completed=bool(data.get("completed", False)),
            completed_date=data.get("completed_date"),
            notes=data.get("notes") or "",
            findings=data.get("findings") or "",
        )


@dataclass
class PDCACycle:
    """
    One improvement cycle.

    ``current_phase`` and ``status`` are computed from the per-phase
    ``completed`` flags, so they can never disagree with them.
    """

    id: str
    title: str
    description: str
    category: Category
    owner: str
    start_date: str
    plan: PDCAPhase = field(default_factory=PDCAPhase)
    do: PDCAPhase = field(default_factory=PDCAPhase)
    check: PDCAPhase = field(default_factory=PDCAPhase)
    act: PDCAPhase = field(default_factory=PDCAPhase)
    linked_initiative_id: str | None = None

    def phase(self, phase: Phase) -> PDCAPhase:
        """The evidence record for a phase."""
        return getattr(self, phase.value)

    @property
    def phases(self) -> list[tuple[Phase, PDCAPhase]]:
        return [(phase, self.phase(phase)) for phase in PHASE_ORDER]

    @property
    def current_phase(self) -> Phase:
        """First incomplete phase, or ``act`` once all are complete."""
        for phase, record in self.phases:
            if not record.completed:
                return phase
        return Phase.ACT

    @property
    def status(self) -> CycleStatus:
        if self.act.completed:
            return CycleStatus.COMPLETED
        return CycleStatus.ON_TRACK

    @property
    def completed_count(self) -> int:
        return sum(1 for _, record in self.phases if record.completed)

    @property
    def progress(self) -> float:
        """Completed phases over four, in [0, 1]."""
        return self.completed_count / len(PHASE_ORDER)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage.

        ``current_phase`` and ``status`` are written for readers but are
        recomputed on load.
        """
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "owner": self.owner,
            "start_date": self.start_date,
            "current_phase": self.current_phase.value,
            "status": self.status.value,
        }
        for phase, record in self.phases:
            data[phase.value] = record.to_dict()
        if self.linked_initiative_id:
            data["linked_initiative_id"] = self.linked_initiative_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PDCACycle":
        """Create from stored record."""
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            category=Category(data["category"]),
            owner=data["owner"],
            start_date=data["start_date"],
            plan=PDCAPhase.from_dict(data.get("plan")),
            do=PDCAPhase.from_dict(data.get("do")),
            check=PDCAPhase.from_dict(data.get("check")),
            act=PDCAPhase.from_dict(data.get("act")),
            linked_initiative_id=data.get("linked_initiative_id"),
        )
