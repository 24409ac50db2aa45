"""The strategy doctor command: store and state health report."""

from pathlib import Path

import typer
from rich.markup import escape

from strategy_engine.config import create_store
from strategy_engine.health_check import get_health_status

from .console import console, create_table, print_error, print_success, print_table, print_warning
from .engine import load_cli_config, require_persistent_store, settings

STATUS_STYLES = {
    "healthy": "green",
    "valid": "green",
    "missing": "dim",
    "degraded": "yellow",
    "incompatible": "red",
    "invalid": "red",
    "error": "red",
}


def doctor_command() -> None:
    """Check store readability, schema versions and state integrity."""
    config = load_cli_config()
    require_persistent_store(config)
    config_path = Path(settings["config_path"]) if settings["config_path"] else None
    health = get_health_status(create_store(config), config_path)

    table = create_table("Health Check")
    table.add_column("Check", style="bold")
    table.add_column("Status")
    table.add_column("Detail")
    for check in ("store", "alignment", "dependencies", "config"):
        result = health[check]
        style = STATUS_STYLES.get(result["status"], "")
        status = f"[{style}]{result['status']}[/{style}]"
        table.add_row(check, status, escape(result.get("reason", "")))
    print_table(table)

    for cycle in health["dependencies"].get("cycles", []):
        console.print("  " + escape(" -> ".join(cycle + [cycle[0]])))

    overall = health["overall"]
    if overall == "healthy":
        print_success("All checks passed")
    elif overall == "degraded":
        print_warning("State is usable but has integrity gaps")
    else:
        print_error("Store or configuration is unusable")
        raise typer.Exit(1)
