"""Dependency CLI commands for cross-initiative dependencies and blockers."""

import typer
from rich.markup import escape

from strategy_engine.dependencies import Dependency, DependencyType

from .console import console, create_table, print_success, print_table, print_warning
from .engine import engine_errors, get_engine

app = typer.Typer(
    name="deps",
    help="Track cross-initiative dependencies and blockers",
    no_args_is_help=True,
)


def _dependency_table(title: str, dependencies: list[Dependency]):
    table = create_table(title)
    table.add_column("ID", style="cyan")
    table.add_column("From")
    table.add_column("Type")
    table.add_column("To")
    table.add_column("Status")
    table.add_column("Description")
    for dep in dependencies:
        style = "red" if dep.is_blocking else ""
        table.add_row(
            dep.id,
            escape(dep.from_initiative_title or dep.from_initiative_id),
            f"[{style}]{dep.type.value}[/{style}]" if style else dep.type.value,
            escape(dep.to_initiative_title or dep.to_initiative_id),
            dep.status.value,
            escape(dep.description),
        )
    return table


@app.command(name="add")
def add(
    from_id: str = typer.Argument(..., help="Initiative that depends"),
    to_id: str = typer.Argument(..., help="Initiative it depends on"),
    description: str = typer.Option(..., "--description", "-d", help="Why the dependency exists"),
    dependency_type: DependencyType = typer.Option(
        DependencyType.BLOCKS, "--type", "-t", help="blocks, enables or informs"
    ),
    from_title: str = typer.Option("", "--from-title", help="Display title of the source"),
    to_title: str = typer.Option("", "--to-title", help="Display title of the target"),
) -> None:
    """Add a dependency between two initiatives."""
    with engine_errors():
        dep = get_engine().dependencies.add_dependency(
            from_id, from_title, to_id, to_title, dependency_type, description
        )
    print_success(f"Dependency added: {dep.id}")


@app.command(name="resolve")
def resolve(dependency_id: str = typer.Argument(..., help="Dependency id")) -> None:
    """Mark a dependency resolved."""
    with engine_errors():
        get_engine().dependencies.resolve_dependency(dependency_id)
    print_success(f"Dependency resolved: {escape(dependency_id)}")


@app.command(name="list")
def list_dependencies(
    dependency_type: DependencyType | None = typer.Option(
        None, "--type", "-t", help="Only this type"
    ),
    include_resolved: bool = typer.Option(
        False, "--all", "-a", help="Include resolved dependencies"
    ),
) -> None:
    """List active dependencies."""
    with engine_errors():
        graph = get_engine().dependencies
        if include_resolved:
            dependencies = [
                d
                for d in graph.list_all()
                if dependency_type is None or d.type is dependency_type
            ]
        else:
            dependencies = graph.list_active(dependency_type)

    if not dependencies:
        console.print("No dependencies found")
        return

    print_table(_dependency_table("Dependencies", dependencies))
    console.print(f"\nTotal: {len(dependencies)}")


@app.command(name="blocking")
def blocking() -> None:
    """List active blocking dependencies."""
    with engine_errors():
        dependencies = get_engine().dependencies.list_blocking()

    if not dependencies:
        print_success("No blocking dependencies")
        return

    print_table(_dependency_table("Blocking Dependencies", dependencies))
    console.print(f"\nTotal: {len(dependencies)}")


@app.command(name="cycles")
def cycles(
    dependency_type: DependencyType = typer.Option(
        DependencyType.BLOCKS, "--type", "-t", help="Edge type to check"
    ),
) -> None:
    """Report dependency cycles among active edges."""
    with engine_errors():
        found = get_engine().dependencies.detect_cycles(dependency_type)

    if not found:
        print_success(f"No {dependency_type.value} cycles")
        return

    print_warning(f"{len(found)} {dependency_type.value} cycle(s) found:")
    for cycle in found:
        console.print("  " + escape(" -> ".join(cycle + [cycle[0]])))
    raise typer.Exit(1)


@app.command(name="summary")
def summary() -> None:
    """Show dependency statistics."""
    with engine_errors():
        stats = get_engine().dependencies.summary()

    console.print("Dependency Statistics")
    console.print("=" * 40)
    console.print(f"Total:           {stats['total']}")
    console.print(f"Active:          {stats['active']}")
    console.print(f"Blocking:        {stats['blocking']}")
    console.print(f"Resolved:        {stats['resolved']}")
    console.print(f"Blocking cycles: {stats['blocking_cycles']}")
    console.print("\nActive By Type:")
    for name, count in stats["active_by_type"].items():
        console.print(f"  {name}: {count}")
