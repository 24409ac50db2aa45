"""X-Matrix CLI commands for objectives, metrics, actions and their links."""

import typer
from rich.markup import escape

from strategy_engine.alignment import ColumnType, ObjectiveKind

from .console import (
    STRENGTH_SYMBOLS,
    console,
    create_table,
    print_info,
    print_success,
    print_table,
)
from .engine import engine_errors, get_engine

app = typer.Typer(
    name="matrix",
    help="Hoshin Kanri X-Matrix alignment",
    no_args_is_help=True,
)


@app.command(name="add-objective")
def add_objective(
    kind: ObjectiveKind = typer.Argument(..., help="breakthrough or annual"),
    description: str = typer.Argument(..., help="Objective description"),
) -> None:
    """Add a breakthrough or annual objective."""
    with engine_errors():
        objective = get_engine().matrix.add_objective(kind, description)
    print_success(f"{kind.value.capitalize()} objective added: {objective.id}")


@app.command(name="add-metric")
def add_metric(
    name: str = typer.Argument(..., help="Metric name"),
    target: float = typer.Argument(..., help="Target value"),
    unit: str = typer.Argument(..., help="Unit, e.g. %"),
) -> None:
    """Add a metric column."""
    with engine_errors():
        metric = get_engine().matrix.add_metric(name, target, unit)
    print_success(f"Metric added: {metric.id}")


@app.command(name="add-action")
def add_action(
    description: str = typer.Argument(..., help="Improvement action"),
    owner: str = typer.Option(..., "--owner", "-o", help="Responsible person"),
) -> None:
    """Add an improvement action column."""
    with engine_errors():
        action = get_engine().matrix.add_action(description, owner)
    print_success(f"Improvement action added: {action.id}")


@app.command(name="toggle")
def toggle(
    objective_id: str = typer.Argument(..., help="Objective id"),
    column_id: str = typer.Argument(..., help="Metric or action id"),
    column_type: ColumnType = typer.Option(
        ColumnType.METRIC, "--type", "-t", help="Column type: metric or action"
    ),
) -> None:
    """Cycle a link: none -> strong -> medium -> weak -> none."""
    with engine_errors():
        link = get_engine().matrix.toggle_link(objective_id, column_id, column_type)
    if link is None:
        print_success(f"Link removed: {escape(objective_id)} -> {escape(column_id)}")
    else:
        print_success(
            f"Link {escape(objective_id)} -> {escape(column_id)}: {link.strength.value}"
        )


@app.command(name="strength")
def strength(
    objective_id: str = typer.Argument(..., help="Objective id"),
    column_id: str = typer.Argument(..., help="Metric or action id"),
    column_type: ColumnType = typer.Option(
        ColumnType.METRIC, "--type", "-t", help="Column type: metric or action"
    ),
) -> None:
    """Show the strength of one link."""
    with engine_errors():
        value = get_engine().matrix.get_strength(objective_id, column_id, column_type)
    console.print(value.value if value else "none")


@app.command(name="remove-objective")
def remove_objective(objective_id: str = typer.Argument(..., help="Objective id")) -> None:
    """Remove an objective (links are kept)."""
    with engine_errors():
        get_engine().matrix.remove_objective(objective_id)
    print_success(f"Objective removed: {escape(objective_id)}")


@app.command(name="remove-metric")
def remove_metric(metric_id: str = typer.Argument(..., help="Metric id")) -> None:
    """Remove a metric (links are kept)."""
    with engine_errors():
        get_engine().matrix.remove_metric(metric_id)
    print_success(f"Metric removed: {escape(metric_id)}")


@app.command(name="remove-action")
def remove_action(action_id: str = typer.Argument(..., help="Action id")) -> None:
    """Remove an improvement action (links are kept)."""
    with engine_errors():
        get_engine().matrix.remove_action(action_id)
    print_success(f"Improvement action removed: {escape(action_id)}")


@app.command(name="show")
def show() -> None:
    """Render the matrix: objectives against metrics and actions."""
    with engine_errors():
        matrix = get_engine().matrix
        objectives = matrix.list_objectives()
        metrics = matrix.list_metrics()
        actions = matrix.list_actions()
        links = {
            (link.objective_id, link.column_type, link.column.id): link.strength.value
            for link in matrix.list_links()
        }

    if not objectives:
        print_info("No objectives yet. Add one with 'strategy matrix add-objective'.")
        return

    table = create_table("X-Matrix")
    table.add_column("Objective", style="bold")
    for metric in metrics:
        header = f"{metric.name}\n{metric.target:g} {metric.unit}"
        table.add_column(escape(header), justify="center")
    for action in actions:
        header = f"{action.description}\n({action.owner})"
        table.add_column(escape(header), justify="center")

    for objective in objectives:
        cells = [f"({objective.kind.value[0].upper()}) {escape(objective.description)}"]
        cells += [
            STRENGTH_SYMBOLS[links.get((objective.id, ColumnType.METRIC, m.id))]
            for m in metrics
        ]
        cells += [
            STRENGTH_SYMBOLS[links.get((objective.id, ColumnType.ACTION, a.id))]
            for a in actions
        ]
        table.add_row(*cells)

    print_table(table)
    console.print("[dim]● strong  ◐ medium  ○ weak[/dim]")


@app.command(name="list")
def list_entries() -> None:
    """List matrix entries with their ids."""
    with engine_errors():
        matrix = get_engine().matrix
        objectives = matrix.list_objectives()
        metrics = matrix.list_metrics()
        actions = matrix.list_actions()

    table = create_table()
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Description")
    for objective in objectives:
        table.add_row(objective.id, objective.kind.value, escape(objective.description))
    for metric in metrics:
        label = f"{metric.name} ({metric.target:g} {metric.unit})"
        table.add_row(metric.id, "metric", escape(label))
    for action in actions:
        table.add_row(action.id, "action", escape(f"{action.description} ({action.owner})"))
    print_table(table)


@app.command(name="dangling")
def dangling() -> None:
    """List links that reference removed entries."""
    with engine_errors():
        links = get_engine().matrix.dangling_links()

    if not links:
        print_success("No dangling links")
        return

    table = create_table("Dangling Links")
    table.add_column("Objective", style="cyan")
    table.add_column("Column")
    table.add_column("Strength")
    for link in links:
        table.add_row(
            escape(link.objective_id),
            escape(f"{link.column_type.value}:{link.column.id}"),
            link.strength.value,
        )
    print_table(table)
    console.print(f"\nTotal: {len(links)}")


@app.command(name="summary")
def summary() -> None:
    """Show matrix statistics."""
    with engine_errors():
        stats = get_engine().matrix.summary()

    console.print("X-Matrix Statistics")
    console.print("=" * 40)
    console.print(f"Breakthrough objectives: {stats['breakthrough_objectives']}")
    console.print(f"Annual objectives:       {stats['annual_objectives']}")
    console.print(f"Metrics:                 {stats['metrics']}")
    console.print(f"Improvement actions:     {stats['actions']}")
    console.print(f"Links:                   {stats['links']}")
    for name, count in stats["by_strength"].items():
        console.print(f"  {name}: {count}")
    console.print(f"Dangling links:          {stats['dangling_links']}")
