"""Rich tables for schema history and configuration display."""

from typing import Any

from rich.markup import escape
from rich.table import Table

from tabletrace.cli.formatters import console
from tabletrace.history.base import HistoryRecord
from tabletrace.schema.registry import RegistryEntry


def create_table(
    title: str | None = None,
    *,
    show_header: bool = True,
    border_style: str = "blue",
    header_style: str = "bold cyan",
) -> Table:
    """Create a Rich Table with consistent tabletrace styling."""
    return Table(
        title=title,
        show_header=show_header,
        border_style=border_style,
        header_style=header_style,
        row_styles=["", "dim"],
    )


def create_key_value_table(data: dict[str, Any], title: str | None = None) -> Table:
    """Create a two-column table for key-value data."""
    table = create_table(title, show_header=False)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(str(key)), escape(str(value)))

    return table


def create_history_table(records: list[HistoryRecord], title: str | None = None) -> Table:
    """One row per history record, in append order."""
    table = create_table(title)
    table.add_column("#", justify="right", style="muted")
    table.add_column("Table", style="table.id", no_wrap=True)
    table.add_column("Change")
    table.add_column("Snapshot", justify="center")
    table.add_column("Columns", justify="right")
    table.add_column("Recorded at")

    for position, record in enumerate(records, start=1):
        table.add_row(
            str(position),
            escape(str(record.table_id)),
            f"[change.{record.change_type.value}]{record.change_type.value}[/]",
            "yes" if record.from_snapshot else "",
            str(len(record.table.columns)),
            record.recorded_at.isoformat(timespec="seconds"),
        )

    return table


def create_registry_table(entries: list[RegistryEntry], title: str | None = None) -> Table:
    """Current definition of each table known to a registry."""
    table = create_table(title)
    table.add_column("Table", style="table.id", no_wrap=True)
    table.add_column("Version", justify="right")
    table.add_column("Primary key")
    table.add_column("Columns")
    table.add_column("Status", justify="center")

    for entry in entries:
        status = "[change.drop]dropped[/]" if entry.dropped else "[success]active[/]"
        table.add_row(
            escape(str(entry.table.id)),
            str(entry.version),
            escape(", ".join(entry.table.primary_key_columns)),
            escape(", ".join(f"{c.name} {c.type_name}" for c in entry.table.columns)),
            status,
        )

    return table


def print_table(table: Table) -> None:
    """Print a Rich Table to the shared console."""
    console.print(table)


__all__ = [
    "create_history_table",
    "create_key_value_table",
    "create_registry_table",
    "create_table",
    "print_table",
]
