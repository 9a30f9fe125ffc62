"""Rich formatters for CLI output.

Holds the Console shared by every command. Styles are named after what
they mark, so tables and panels never hard-code colors.
"""

from rich.console import Console
from rich.theme import Theme

TABLETRACE_THEME = Theme(
    {
        "success": "green",
        "error": "red",
        "info": "blue",
        "muted": "dim",
        "table.id": "bold cyan",
        "change.create": "green",
        "change.alter": "yellow",
        "change.drop": "red",
        "change.truncate": "magenta",
        "change.database": "blue",
    }
)

console = Console(theme=TABLETRACE_THEME)

__all__ = ["TABLETRACE_THEME", "console"]
