"""Table filters deciding which tables a connector captures.

Filters are pure predicates over TableId. The regex filter follows the
usual include-list / exclude-list semantics: an empty include list admits
every table, and an exclude match always wins.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import re
from typing import TYPE_CHECKING, Protocol

from tabletrace.core.errors import ConfigError
from tabletrace.relational.table_id import TableId

if TYPE_CHECKING:
    from tabletrace.config.models import FilterConfig

SYSTEM_SCHEMAS = frozenset({"sys", "cdc", "information_schema", "guest"})
SYSTEM_TABLES = frozenset({"dbo.systranschemas"})


class TableFilter(Protocol):
    """Predicate deciding whether a table is captured."""

    def is_included(self, table_id: TableId) -> bool:
        """Return True if changes to the table should be captured."""
        ...


class PredicateTableFilter:
    """Adapts a plain callable to the TableFilter protocol."""

    def __init__(self, predicate: Callable[[TableId], bool]) -> None:
        self._predicate = predicate

    def is_included(self, table_id: TableId) -> bool:
        return bool(self._predicate(table_id))


def _compile(patterns: Iterable[str], config_key: str) -> tuple[re.Pattern[str], ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern.strip(), re.IGNORECASE))
        except re.error as e:
            raise ConfigError(
                f"Invalid table filter pattern '{pattern}': {e}",
                config_key=config_key,
            ) from e
    return tuple(compiled)


class RegexTableFilter:
    """Include/exclude filter over regular expressions.

    Each pattern must match the whole of either `schema.table` or
    `catalog.schema.table`, case-insensitively.

    Example:
        table_filter = RegexTableFilter(include=[r"dbo\\.orders.*"], exclude=[r"dbo\\.orders_tmp"])
        table_filter.is_included(TableId("shop", "dbo", "orders"))  # True
    """

    def __init__(
        self,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        *,
        exclude_system_tables: bool = True,
    ) -> None:
        self._include = _compile(include, "filters.table_include_list")
        self._exclude = _compile(exclude, "filters.table_exclude_list")
        self._exclude_system_tables = exclude_system_tables

    @classmethod
    def from_config(cls, config: FilterConfig) -> RegexTableFilter:
        """Build a filter from the connector's filter configuration."""
        return cls(
            include=config.table_include_list,
            exclude=config.table_exclude_list,
            exclude_system_tables=config.exclude_system_tables,
        )

    def _is_system_table(self, table_id: TableId) -> bool:
        if table_id.schema and table_id.schema.lower() in SYSTEM_SCHEMAS:
            return True
        return table_id.schema_qualified.lower() in SYSTEM_TABLES

    @staticmethod
    def _matches(patterns: tuple[re.Pattern[str], ...], table_id: TableId) -> bool:
        candidates = {table_id.schema_qualified, str(table_id)}
        return any(
            pattern.fullmatch(candidate) for pattern in patterns for candidate in candidates
        )

    def is_included(self, table_id: TableId) -> bool:
        if self._exclude_system_tables and self._is_system_table(table_id):
            return False
        if self._matches(self._exclude, table_id):
            return False
        if not self._include:
            return True
        return self._matches(self._include, table_id)
