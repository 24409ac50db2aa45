"""
Strategy Engine - single entry point wiring the three engines to one store.
"""

from pathlib import Path
from typing import Any

from .alignment import RelationshipMatrix
from .config import create_store, enforce_references, load_config
from .dependencies import DependencyGraph
from .pdca import PDCACycleTracker
from .store import EntityStore


class StrategyEngine:
    """
    Main interface for the alignment, dependency and PDCA engines.

    The engines share nothing but the store; each reads and writes only its
    own collections.
    """

    def __init__(self, store: EntityStore, enforce_references: bool = False):
        self.store = store
        self.matrix = RelationshipMatrix(store, enforce_references)
        self.dependencies = DependencyGraph(store, enforce_references)
        self.pdca = PDCACycleTracker(store, enforce_references)

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any] | None = None,
        project_root: Path | None = None,
    ) -> "StrategyEngine":
        """Build an engine from configuration (loaded if not given)."""
        if config is None:
            config = load_config(project_root=project_root)
        return cls(create_store(config, project_root), enforce_references(config))
