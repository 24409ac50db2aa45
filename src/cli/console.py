"""Console output helpers for the strategy CLI.

Usage:
    from cli.console import console, print_success, print_error

    console.print("Hello world", style="bold")
    print_success("Operation completed")
    print_error("Something went wrong")
    print_panel("Title", "Content here")
"""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from strategy_engine.errors import StateEngineError

console = Console()

# Matrix cell glyphs by link strength
STRENGTH_SYMBOLS = {
    "strong": "●",
    "medium": "◐",
    "weak": "○",
    None: "·",
}


def print_success(message: str) -> None:
    """Print a success message (green checkmark)."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message (red X)."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message (yellow warning sign)."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message (blue info sign)."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_engine_error(error: StateEngineError) -> None:
    """Print an engine error as ``kind: message``."""
    print_error(f"{error.kind}: {escape(error.message)}")


def print_panel(title: str, content: str, style: str = "blue") -> None:
    """Print content in a panel/box."""
    console.print(Panel(content, title=title, border_style=style))


def create_table(title: str = "") -> Table:
    """Create a rich table."""
    return Table(title=title) if title else Table()


def print_table(table: Any) -> None:
    """Print a table."""
    console.print(table)


__all__ = [
    "console",
    "STRENGTH_SYMBOLS",
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_engine_error",
    "print_panel",
    "create_table",
    "print_table",
]
