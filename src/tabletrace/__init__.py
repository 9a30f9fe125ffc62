"""tabletrace - captured-table resolver and schema-change applier for CDC.

Determines which tables of a source database a change-data-capture
connector captures, and keeps a versioned, history-backed registry of
their definitions as schema change events arrive.

Example:
    from tabletrace.schema import DatabaseSchema
    from tabletrace.history import InMemorySchemaHistory

    schema = DatabaseSchema.create(config, lister, InMemorySchemaHistory())
    await schema.apply_schema_change(event)
"""

__version__ = "0.1.0"

__all__ = ["__version__", "main"]


def main() -> None:
    """Main entry point for the tabletrace CLI."""
    from tabletrace.cli.main import app

    app()
