"""History command group for tabletrace.

Inspect the durable schema history log.
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from tabletrace.cli.formatters.panels import print_error, print_info
from tabletrace.cli.formatters.tables import (
    create_history_table,
    create_registry_table,
    print_table,
)
from tabletrace.config.loader import load_config, resolve_config_path
from tabletrace.config.models import ConnectorConfig
from tabletrace.core.errors import ConfigError, PersistenceError, ValidationError
from tabletrace.history.base import HistoryRecord
from tabletrace.history.event_store import EventStoreSchemaHistory
from tabletrace.observability.logging import (
    LoggingConfig,
    configure_logging,
    set_console_logging,
)
from tabletrace.relational.table_id import TableId
from tabletrace.schema.applier import SchemaChangeApplier
from tabletrace.schema.database_schema import default_schema_builder
from tabletrace.schema.registry import RegistryEntry, SchemaRegistry

app = typer.Typer(
    name="history",
    help="Inspect the schema history log.",
    no_args_is_help=True,
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config.yaml."),
]
DebugOption = Annotated[
    bool,
    typer.Option("--debug", help="Show verbose logs on the console."),
]


def _setup_logging(config: ConnectorConfig, config_path: Path, debug: bool) -> None:
    configure_logging(LoggingConfig.from_settings(config.logging, config_path.parent, debug=debug))
    set_console_logging(debug)


async def _read_history(
    config_path: Path | None, table: str | None, debug: bool
) -> list[HistoryRecord]:
    resolved = resolve_config_path(config_path)
    config = load_config(resolved)
    _setup_logging(config, resolved, debug)
    history = EventStoreSchemaHistory.from_config(config.history, resolved.parent)
    await history.initialize()
    try:
        if table:
            return await history.replay_table(TableId.parse(table))
        return await history.replay()
    finally:
        await history.close()


async def _rebuild_registry(config_path: Path | None, debug: bool) -> list[RegistryEntry]:
    resolved = resolve_config_path(config_path)
    config = load_config(resolved)
    _setup_logging(config, resolved, debug)
    history = EventStoreSchemaHistory.from_config(config.history, resolved.parent)
    await history.initialize()
    try:
        registry = SchemaRegistry()
        applier = SchemaChangeApplier(registry, default_schema_builder(config), history)
        for record in await history.replay():
            applier.restore(record)
    finally:
        await history.close()

    snapshot = registry.snapshot()
    return [snapshot[table_id] for table_id in sorted(snapshot)]


@app.command("list")
def list_records(
    config_path: ConfigPathOption = None,
    table: Annotated[
        str | None,
        typer.Option("--table", "-t", help="Only records of this table (catalog.schema.table)."),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Show only the most recent N records."),
    ] = 50,
    debug: DebugOption = False,
) -> None:
    """List recorded schema changes in append order."""
    try:
        records = asyncio.run(_read_history(config_path, table, debug))
    except (ConfigError, PersistenceError, ValidationError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not records:
        print_info("No schema changes recorded.")
        return

    print_table(create_history_table(records[-limit:], "Schema History"))


@app.command()
def tables(config_path: ConfigPathOption = None, debug: DebugOption = False) -> None:
    """Replay the history and show the resulting table definitions."""
    try:
        entries = asyncio.run(_rebuild_registry(config_path, debug))
    except (ConfigError, PersistenceError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not entries:
        print_info("No tables recorded.")
        return

    print_table(create_registry_table(entries, "Recovered Tables"))


__all__ = ["app"]
