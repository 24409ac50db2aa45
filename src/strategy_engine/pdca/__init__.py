"""Improvement-Cycle State Machine - Plan-Do-Check-Act tracking

Usage:
    from strategy_engine.pdca import PDCACycleTracker

    tracker = PDCACycleTracker(store)
    cycle = tracker.create_cycle("Reduce Defects", "Scrap rate is 4%",
                                 "quality", "Ann")
    tracker.complete_phase(cycle.id, "plan", notes="root cause found")
"""

from .models import (
    PHASE_INFO,
    PHASE_ORDER,
    Category,
    CycleStatus,
    PDCACycle,
    PDCAPhase,
    Phase,
)
from .operations import PDCACycleTracker, progress
from .queries import PDCAQueries

__all__ = [
    "PDCACycleTracker",
    "PDCAQueries",
    "PDCACycle",
    "PDCAPhase",
    "Phase",
    "PHASE_ORDER",
    "PHASE_INFO",
    "Category",
    "CycleStatus",
    "progress",
]
