"""Engine access shared by the CLI command groups."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape

from strategy_engine import StrategyEngine
from strategy_engine.config import ConfigurationError, configure_logging, load_config
from strategy_engine.errors import StateEngineError

from .console import print_engine_error, print_error

# Populated by the root callback for the current invocation
settings: dict[str, Any] = {"config_path": None, "config": None}


def load_cli_config() -> dict:
    """Load (once) the configuration for this invocation, exiting on error."""
    if settings["config"] is None:
        try:
            settings["config"] = load_config(config_path=settings["config_path"])
        except ConfigurationError as e:
            print_error(f"configuration: {escape(str(e))}")
            raise typer.Exit(1)
    return settings["config"]


def require_persistent_store(config: dict) -> None:
    """Exit unless the configured store keeps state between invocations."""
    if config.get("store", {}).get("backend", "sqlite") == "memory":
        print_error(
            "configuration: the memory backend does not persist between commands; "
            "set store.backend to sqlite"
        )
        raise typer.Exit(1)


def setup(config_path: str | None) -> None:
    """Record --config and configure logging from it."""
    settings["config_path"] = config_path
    settings["config"] = None
    configure_logging(load_cli_config())


def get_engine(project_root: Path | None = None) -> StrategyEngine:
    """Build the engine from configuration."""
    config = load_cli_config()
    require_persistent_store(config)
    return StrategyEngine.from_config(config, project_root=project_root)


@contextmanager
def engine_errors() -> Iterator[None]:
    """Render engine errors and exit with status 1."""
    try:
        yield
    except StateEngineError as e:
        print_engine_error(e)
        raise typer.Exit(1)
