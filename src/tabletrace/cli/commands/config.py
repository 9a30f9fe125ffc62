"""Config command group for tabletrace.

Create and inspect connector configuration.
"""

from pathlib import Path
from typing import Annotated

import typer

from tabletrace.cli.formatters.panels import print_error, print_success
from tabletrace.cli.formatters.tables import create_key_value_table, print_table
from tabletrace.config.loader import create_default_config, load_config
from tabletrace.core.errors import ConfigError

app = typer.Typer(
    name="config",
    help="Manage tabletrace configuration.",
    no_args_is_help=True,
)

ConfigDirOption = Annotated[
    Path | None,
    typer.Option("--dir", "-d", help="Directory to write config.yaml to."),
]
ConfigPathOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config.yaml."),
]


@app.command()
def init(
    config_dir: ConfigDirOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config.yaml."),
    ] = False,
) -> None:
    """Write a default configuration file."""
    try:
        path = create_default_config(config_dir, overwrite=force)
    except ConfigError as e:
        print_error(e.message)
        raise typer.Exit(code=1) from e

    print_success(f"Configuration written to {path}")


@app.command()
def show(config_path: ConfigPathOption = None) -> None:
    """Display the effective connector configuration."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(e.message)
        raise typer.Exit(code=1) from e

    data = {
        "database_name": config.database_name,
        "server_name": config.server_name,
        "table_include_list": ", ".join(config.filters.table_include_list) or "<all>",
        "table_exclude_list": ", ".join(config.filters.table_exclude_list) or "<none>",
        "exclude_system_tables": config.filters.exclude_system_tables,
        "decimal_handling_mode": config.decimal_handling_mode.value,
        "history.database_path": config.history.database_path,
        "logging.level": config.logging.level,
    }
    print_table(create_key_value_table(data, "Connector Configuration"))


__all__ = ["app"]
