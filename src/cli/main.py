"""Strategy CLI entry point."""

import typer
from rich.console import Console

from . import __version__
from .deps import app as deps_app
from .doctor import doctor_command
from .engine import setup
from .init_command import init_command
from .matrix import app as matrix_app
from .pdca import app as pdca_app

app = typer.Typer(
    name="strategy",
    help="Strategy - X-Matrix alignment, initiative dependencies and PDCA cycles",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"strategy version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: .strategy/config.yaml)",
        envvar="STRATEGY_CONFIG_PATH",
    ),
) -> None:
    """Strategy - X-Matrix alignment, initiative dependencies and PDCA cycles."""
    setup(config)


app.command(name="init")(init_command)
app.command(name="doctor")(doctor_command)

app.add_typer(matrix_app, name="matrix")
app.add_typer(deps_app, name="deps")
app.add_typer(pdca_app, name="pdca")


if __name__ == "__main__":
    app()
