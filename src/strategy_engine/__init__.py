"""Strategy Engine - strategic alignment and continuous-improvement state

Three independent engines over a shared entity store:
- alignment: Hoshin Kanri X-Matrix links with cyclable strength
- dependencies: typed initiative dependencies with a resolution lifecycle
- pdca: Plan-Do-Check-Act cycles with gated phase progression

Usage:
    from strategy_engine import StrategyEngine
    from strategy_engine.store import InMemoryEntityStore

    engine = StrategyEngine(InMemoryEntityStore())
    cycle = engine.pdca.create_cycle("Reduce Defects", "Scrap rate is 4%",
                                     "quality", "Ann")
"""

from .engine import StrategyEngine
from .errors import (
    ConcurrentModificationError,
    InvalidTransitionError,
    NotFoundError,
    SchemaVersionError,
    StateEngineError,
    ValidationError,
)

__all__ = [
    "StrategyEngine",
    "StateEngineError",
    "ValidationError",
    "InvalidTransitionError",
    "NotFoundError",
    "ConcurrentModificationError",
    "SchemaVersionError",
]

__version__ = "0.1.0"
