"""The strategy init command implementation."""

import shutil
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.panel import Panel

from strategy_engine.config import CONFIG_FILENAME
from strategy_engine.store import SQLiteEntityStore
from strategy_engine.store.database import DB_FILENAME, STRATEGY_DIR

from .console import console


def generate_config(enforce_references: bool = False) -> dict[str, Any]:
    """Build the initial project configuration."""
    return {
        "store": {
            "backend": "sqlite",
            "path": f"{STRATEGY_DIR}/{DB_FILENAME}",
            "timeout": 5.0,
        },
        "integrity": {
            "enforce_references": enforce_references,
        },
        "logging": {
            "level": "INFO",
        },
    }


def write_config(path: Path, config: dict[str, Any]) -> None:
    """Write configuration as YAML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write("# Strategy engine configuration\n")
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)


def init_command(
    enforce_references: bool = typer.Option(
        False,
        "--enforce-references",
        help="Reject links and dependencies that name unknown ids",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing .strategy directory",
    ),
) -> None:
    """Initialize a strategy workspace in the current directory.

    Creates a .strategy/ directory with configuration and an empty store.
    """
    cwd = Path.cwd()
    strategy_dir = cwd / STRATEGY_DIR

    if strategy_dir.exists():
        if not force:
            console.print(
                f"[red]Error:[/red] {STRATEGY_DIR}/ already exists. "
                "Use --force to overwrite.",
                style="bold",
            )
            raise typer.Exit(1)
        console.print(f"[yellow]Overwriting existing {STRATEGY_DIR}/ directory...[/yellow]")
        shutil.rmtree(strategy_dir)

    config = generate_config(enforce_references=enforce_references)
    config_path = strategy_dir / CONFIG_FILENAME
    write_config(config_path, config)
    console.print(f"  [green]Created[/green] {STRATEGY_DIR}/{CONFIG_FILENAME}")

    store = SQLiteEntityStore(db_path=strategy_dir / DB_FILENAME)
    console.print(
        f"  [green]Created[/green] {STRATEGY_DIR}/{DB_FILENAME} "
        f"(schema {store.get_schema_version()})"
    )

    console.print(
        Panel(
            "[green]Strategy workspace initialized![/green]\n\n"
            f"Created: {STRATEGY_DIR}/\n  - {CONFIG_FILENAME}\n  - {DB_FILENAME}\n\n"
            "[dim]Next steps:[/dim]\n"
            "  1. strategy matrix add-objective breakthrough \"...\"\n"
            "  2. strategy pdca create \"...\" -d \"...\" -o owner\n"
            "  3. strategy doctor",
            title="Success",
            border_style="green",
        )
    )
