"""Shared pytest fixtures for strategy-engine tests.

Every engine fixture is backed by a fresh store, so tests never share state.
Store-level tests run against both backends through ``any_store``.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from strategy_engine import StrategyEngine
from strategy_engine.alignment import RelationshipMatrix
from strategy_engine.dependencies import DependencyGraph
from strategy_engine.pdca import PDCACycleTracker
from strategy_engine.store import InMemoryEntityStore, SQLiteEntityStore

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer STRATEGY_* settings out of the tests."""
    for name in ("STRATEGY_CONFIG_PATH", "STRATEGY_STORE_PATH", "STRATEGY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return a temporary project root containing an empty .strategy/ directory."""
    (tmp_path / ".strategy").mkdir()
    return tmp_path


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryEntityStore:
    """Provide an empty in-memory store."""
    return InMemoryEntityStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SQLiteEntityStore:
    """Provide an empty SQLite store in a temporary directory."""
    return SQLiteEntityStore(db_path=tmp_path / ".strategy" / "strategy.db")


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request: pytest.FixtureRequest, tmp_path: Path) -> Generator:
    """Provide each store backend in turn."""
    if request.param == "memory":
        yield InMemoryEntityStore()
    else:
        yield SQLiteEntityStore(db_path=tmp_path / ".strategy" / "strategy.db")


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine(memory_store: InMemoryEntityStore) -> StrategyEngine:
    """Provide an engine over the in-memory store."""
    return StrategyEngine(memory_store)


@pytest.fixture
def matrix(memory_store: InMemoryEntityStore) -> RelationshipMatrix:
    return RelationshipMatrix(memory_store)


@pytest.fixture
def graph(memory_store: InMemoryEntityStore) -> DependencyGraph:
    return DependencyGraph(memory_store)


@pytest.fixture
def tracker(memory_store: InMemoryEntityStore) -> PDCACycleTracker:
    return PDCACycleTracker(memory_store)
