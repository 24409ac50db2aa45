"""PDCA CLI commands for Plan-Do-Check-Act improvement cycles."""

from enum import Enum

import typer
from rich.markup import escape

from strategy_engine.pdca import PHASE_INFO, Category, PDCACycle, Phase

from .console import console, create_table, print_panel, print_success, print_table
from .engine import engine_errors, get_engine

app = typer.Typer(
    name="pdca",
    help="Plan-Do-Check-Act continuous improvement cycles",
    no_args_is_help=True,
)


class StatusFilter(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ALL = "all"


def _progress_bar(cycle: PDCACycle, width: int = 12) -> str:
    filled = round(cycle.progress * width)
    return "█" * filled + "░" * (width - filled) + f" {cycle.progress:.0%}"


@app.command(name="create")
def create(
    title: str = typer.Argument(..., help="Cycle title"),
    description: str = typer.Option(..., "--description", "-d", help="Problem statement"),
    owner: str = typer.Option(..., "--owner", "-o", help="Responsible person"),
    category: Category = typer.Option(Category.QUALITY, "--category", "-c"),
    start_date: str | None = typer.Option(None, "--start-date", help="YYYY-MM-DD (default: today)"),
    initiative: str | None = typer.Option(None, "--initiative", "-i", help="Linked initiative id"),
) -> None:
    """Start a new PDCA cycle."""
    with engine_errors():
        cycle = get_engine().pdca.create_cycle(
            title, description, category, owner, start_date, initiative
        )
    print_success(f"PDCA cycle created: {cycle.id}")


@app.command(name="complete")
def complete(
    cycle_id: str = typer.Argument(..., help="Cycle id"),
    phase: Phase = typer.Argument(..., help="plan, do, check or act"),
    notes: str = typer.Option("", "--notes", "-n", help="What was done"),
    findings: str = typer.Option("", "--findings", "-f", help="What was learned"),
) -> None:
    """Complete the current phase of a cycle."""
    with engine_errors():
        cycle = get_engine().pdca.complete_phase(cycle_id, phase, notes, findings)
    print_success(f"{PHASE_INFO[phase]['label']} phase completed!")
    if cycle.status.value == "completed":
        print_success(f"Cycle {cycle.id} completed")
    else:
        console.print(f"Current phase: {cycle.current_phase.value}")


@app.command(name="show")
def show(cycle_id: str = typer.Argument(..., help="Cycle id")) -> None:
    """Show a cycle with its phase history."""
    with engine_errors():
        cycle = get_engine().pdca.get(cycle_id)

    lines = [
        f"[bold]{escape(cycle.title)}[/bold] ({cycle.category.value})",
        escape(cycle.description),
        "",
        f"Owner: {escape(cycle.owner)}    Started: {cycle.start_date}    "
        f"Status: {cycle.status.value}",
        f"Progress: {_progress_bar(cycle)}",
    ]
    if cycle.linked_initiative_id:
        lines.append(f"Initiative: {escape(cycle.linked_initiative_id)}")
    lines.append("")
    for phase, record in cycle.phases:
        info = PHASE_INFO[phase]
        marker = "✓" if record.completed else ("→" if phase is cycle.current_phase else " ")
        lines.append(f"{marker} {info['label']}: {info['description']}")
        if record.completed:
            lines.append(f"    Completed {record.completed_date}")
            if record.notes:
                lines.append(f"    Notes: {escape(record.notes)}")
            if record.findings:
                lines.append(f"    Findings: {escape(record.findings)}")
    print_panel(cycle.id, "\n".join(lines))


@app.command(name="list")
def list_cycles(
    status: StatusFilter = typer.Option(StatusFilter.ACTIVE, "--status", "-s"),
) -> None:
    """List PDCA cycles."""
    with engine_errors():
        tracker = get_engine().pdca
        if status is StatusFilter.ACTIVE:
            cycles = tracker.list_active()
        elif status is StatusFilter.COMPLETED:
            cycles = tracker.list_completed()
        else:
            cycles = tracker.list_cycles()

    if not cycles:
        console.print("No cycles" if status is StatusFilter.ALL else f"No {status.value} cycles")
        return

    table = create_table("PDCA Cycles")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Owner")
    table.add_column("Phase")
    table.add_column("Progress")
    for cycle in cycles:
        table.add_row(
            cycle.id,
            escape(cycle.title),
            cycle.category.value,
            escape(cycle.owner),
            cycle.status.value if cycle.status.value == "completed" else cycle.current_phase.value,
            _progress_bar(cycle),
        )
    print_table(table)
    console.print(f"\nTotal: {len(cycles)}")


@app.command(name="summary")
def summary() -> None:
    """Show PDCA statistics."""
    with engine_errors():
        stats = get_engine().pdca.summary()

    console.print("PDCA Statistics")
    console.print("=" * 40)
    console.print(f"Total:            {stats['total']}")
    console.print(f"Active:           {stats['active']}")
    console.print(f"Completed:        {stats['completed']}")
    console.print(f"Average progress: {stats['average_progress']:.0%}")
    console.print("\nActive By Phase:")
    for name, count in stats["active_by_phase"].items():
        console.print(f"  {name}: {count}")
    console.print("\nBy Category:")
    for name, count in stats["by_category"].items():
        console.print(f"  {name}: {count}")
