"""Tests for the StrategyEngine facade."""

from pathlib import Path

import yaml

from strategy_engine import StrategyEngine
from strategy_engine.store import InMemoryEntityStore, SQLiteEntityStore
from strategy_engine.store.schema import ALIGNMENT_LINKS, DEPENDENCIES, PDCA_CYCLES


class TestStrategyEngine:
    """Wiring of the three engines to one store."""

    def test_engines_share_store(self, memory_store):
        engine = StrategyEngine(memory_store)
        assert engine.matrix.store is memory_store
        assert engine.dependencies.store is memory_store
        assert engine.pdca.store is memory_store

    def test_engines_write_only_their_collections(self, engine):
        engine.matrix.toggle_link("o", "m", "metric")
        assert engine.store.collections() == [ALIGNMENT_LINKS]

        engine.dependencies.add_dependency("a", "A", "b", "B", "enables", "x")
        engine.pdca.create_cycle("T", "D", "quality", "Ann")
        assert engine.store.collections() == sorted([ALIGNMENT_LINKS, DEPENDENCIES, PDCA_CYCLES])

    def test_enforce_references_propagates(self, memory_store):
        engine = StrategyEngine(memory_store, enforce_references=True)
        assert engine.matrix.enforce_references
        assert engine.dependencies.enforce_references
        assert engine.pdca.enforce_references


class TestFromConfig:
    """Tests for StrategyEngine.from_config."""

    def test_default_sqlite_in_project(self, project_dir: Path):
        engine = StrategyEngine.from_config(project_root=project_dir)
        assert isinstance(engine.store, SQLiteEntityStore)
        assert engine.store.db_path == project_dir / ".strategy" / "strategy.db"

    def test_memory_backend(self, tmp_path: Path):
        engine = StrategyEngine.from_config({"store": {"backend": "memory"}}, tmp_path)
        assert isinstance(engine.store, InMemoryEntityStore)

    def test_config_file_enables_references(self, project_dir: Path):
        with open(project_dir / ".strategy" / "config.yaml", "w") as f:
            yaml.dump({"store": {"backend": "memory"}, "integrity": {"enforce_references": True}}, f)

        engine = StrategyEngine.from_config(project_root=project_dir)

        assert engine.matrix.enforce_references is True

    def test_state_survives_reopen(self, project_dir: Path):
        cycle = StrategyEngine.from_config(project_root=project_dir).pdca.create_cycle(
            "Reduce Defects", "Scrap rate is 4%", "quality", "Ann"
        )
        StrategyEngine.from_config(project_root=project_dir).pdca.complete_phase(cycle.id, "plan")

        reopened = StrategyEngine.from_config(project_root=project_dir)
        assert reopened.pdca.get(cycle.id).current_phase.value == "do"
