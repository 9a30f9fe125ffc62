"""Qualified table identifiers.

A TableId names a table by catalog (database), schema and table name. It
is the key of both the capture set and the schema registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

from tabletrace.core.errors import ValidationError


def _split_identifier(text: str) -> list[str]:
    """Split a dotted identifier, honouring [bracket] and "double" quoting."""
    parts: list[str] = []
    current: list[str] = []
    closing: str | None = None

    for char in text:
        if closing is not None:
            if char == closing:
                closing = None
            else:
                current.append(char)
        elif char == "[":
            closing = "]"
        elif char == '"':
            closing = '"'
        elif char == ".":
            parts.append("".join(current))
            current = []
        else:
            current.append(char)

    if closing is not None:
        raise ValidationError("Unterminated quoted identifier", field="table_id", value=text)

    parts.append("".join(current))
    return [part.strip() for part in parts]


def _quote_part(part: str) -> str:
    """Bracket a part that would not survive _split_identifier unquoted."""
    if not any(char in part for char in '.[]"'):
        return part
    if "]" in part:
        return f'"{part}"'
    return f"[{part}]"


@total_ordering
@dataclass(frozen=True, slots=True)
class TableId:
    """Immutable qualified identifier of a table.

    Equality and hashing use all three parts. Ordering sorts missing
    catalog/schema parts before present ones.

    Attributes:
        catalog: Database (catalog) name, if known.
        schema: Schema name, if known.
        table: Table name.
    """

    catalog: str | None
    schema: str | None
    table: str

    def __post_init__(self) -> None:
        if not self.table:
            raise ValidationError("Table name must not be empty", field="table", value=self.table)

    @classmethod
    def parse(cls, text: str) -> TableId:
        """Parse `table`, `schema.table` or `catalog.schema.table`.

        Args:
            text: Dotted identifier; parts may be quoted with [] or "".

        Returns:
            The parsed TableId.

        Raises:
            ValidationError: If the identifier is empty, has empty parts or
                more than three parts.
        """
        parts = _split_identifier(text.strip())
        if len(parts) > 3:
            raise ValidationError(
                "Table identifier has more than three parts", field="table_id", value=text
            )
        if any(not part for part in parts):
            raise ValidationError(
                "Table identifier has an empty part", field="table_id", value=text
            )

        if len(parts) == 3:
            return cls(catalog=parts[0], schema=parts[1], table=parts[2])
        if len(parts) == 2:
            return cls(catalog=None, schema=parts[0], table=parts[1])
        return cls(catalog=None, schema=None, table=parts[0])

    @property
    def identifier(self) -> str:
        """Dotted identifier, used as history aggregate id.

        Parts containing dots or quote characters are bracketed, so the
        identifier parses back to the same TableId.
        """
        return str(self)

    @property
    def schema_qualified(self) -> str:
        """`schema.table`, or just the table name when schema is unknown."""
        if self.schema:
            return f"{self.schema}.{self.table}"
        return self.table

    def _sort_key(self) -> tuple[tuple[bool, str], tuple[bool, str], str]:
        return (
            (self.catalog is not None, self.catalog or ""),
            (self.schema is not None, self.schema or ""),
            self.table,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TableId):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return ".".join(
            _quote_part(part) for part in (self.catalog, self.schema, self.table) if part
        )
