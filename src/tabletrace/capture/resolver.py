"""Resolution of the set of captured tables.

At connector startup the tables visible in the source database are listed
once and filtered through the configured table filter. The result is the
capture set for the lifetime of the connector instance.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

import structlog

from tabletrace.core.errors import CaptureResolutionError
from tabletrace.relational.filters import TableFilter
from tabletrace.relational.table_id import TableId

log = structlog.get_logger()


class TableLister(Protocol):
    """Lists the tables of a database. Provided by the connection layer."""

    def list_tables(self, database: str) -> set[TableId]:
        """Return every user table of the database.

        Any exception signals that the listing could not be read
        (connectivity, permissions).
        """
        ...


def resolve_captured_tables(
    all_tables: Iterable[TableId], include_filter: TableFilter
) -> frozenset[TableId]:
    """Select the tables admitted by the filter.

    Args:
        all_tables: Every table visible in the source database.
        include_filter: Predicate deciding which tables are captured.

    Returns:
        Exactly the tables of all_tables the filter includes.
    """
    captured: set[TableId] = set()
    for table_id in all_tables:
        if include_filter.is_included(table_id):
            captured.add(table_id)
        else:
            log.debug("capture.table.skipped", table_id=str(table_id), reason="filtered")
    return frozenset(captured)


class CaptureSetResolver:
    """Determines the capture set from the live table listing.

    Usage:
        resolver = CaptureSetResolver(lister, RegexTableFilter.from_config(config.filters))
        captured = resolver.determine("inventory")
    """

    def __init__(self, lister: TableLister, include_filter: TableFilter) -> None:
        self._lister = lister
        self._filter = include_filter

    def determine(self, database: str) -> frozenset[TableId]:
        """List the database's tables and filter them.

        Raises:
            CaptureResolutionError: If the listing fails. Not retried.
        """
        try:
            all_tables = self._lister.list_tables(database)
        except Exception as e:
            log.error(
                "capture.set.resolution_failed",
                database=database,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise CaptureResolutionError.from_exception(e, database=database) from e

        captured = resolve_captured_tables(all_tables, self._filter)
        log.info(
            "capture.set.resolved",
            database=database,
            listed=len(all_tables),
            captured=len(captured),
        )
        return captured
