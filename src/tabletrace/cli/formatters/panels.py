"""Rich panels for short status messages."""

from rich.markup import escape
from rich.panel import Panel

from tabletrace.cli.formatters import console


def _panel(message: str, title: str, style: str) -> Panel:
    # Messages carry table ids and regex patterns, which may contain [brackets]
    return Panel(
        f"[{style}]{escape(message)}[/]",
        title=f"[bold {style}]{title}[/]",
        border_style=style,
        expand=False,
    )


def print_info(message: str, title: str = "Info") -> None:
    console.print(_panel(message, title, "info"))


def print_error(message: str, title: str = "Error") -> None:
    console.print(_panel(message, title, "error"))


def print_success(message: str, title: str = "Success") -> None:
    console.print(_panel(message, title, "success"))


__all__ = ["print_error", "print_info", "print_success"]
