"""Adjustment of derived schema and field names.

Published schema names may only contain letters, digits, underscores and
dots, and must not start with a digit.
"""

import re

_INVALID_CHARACTERS = re.compile(r"[^A-Za-z0-9_.]")


class SchemaNameAdjuster:
    """Replaces characters that are not valid in published schema names.

    Example:
        SchemaNameAdjuster().adjust("server1.dbo.order-items")
        # "server1.dbo.order_items"
    """

    def __init__(self, replacement: str = "_") -> None:
        self._replacement = replacement

    def adjust(self, name: str) -> str:
        adjusted = _INVALID_CHARACTERS.sub(self._replacement, name)
        if adjusted and adjusted[0].isdigit():
            adjusted = self._replacement + adjusted
        return adjusted
