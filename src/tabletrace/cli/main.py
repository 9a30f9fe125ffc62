"""tabletrace CLI main entry point.

Defines the main Typer application and registers the command groups.
"""

from typing import Annotated

import typer

from tabletrace import __version__
from tabletrace.cli.commands import config, history
from tabletrace.cli.formatters import console

app = typer.Typer(
    name="tabletrace",
    help="tabletrace - captured tables and schema history of a CDC connector",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config.app, name="config")
app.add_typer(history.app, name="history")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]tabletrace[/] version [green]{__version__}[/]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """tabletrace - captured tables and schema history of a CDC connector.

    Use [bold cyan]tabletrace COMMAND --help[/] for command-specific help.
    """


__all__ = ["app", "main"]
