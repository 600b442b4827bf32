"""Centralized Rich Console management.

One Console instance is shared by the CLI and the output helpers so tests
can swap in a recording console.
"""

from rich.console import Console
from rich.markup import escape

_console: Console | None = None


def get_console() -> Console:
    """Get or create the global Rich Console instance.

    Returns:
        Console: The global Rich Console instance
    """
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console | None) -> None:
    """Replace the global console (None restores a fresh default on next use)."""
    global _console
    _console = console


def safe_print(message: str, style: str | None = None) -> None:
    """Print plain text with optional styling.

    Square brackets in the message (common in track names) are escaped so
    they are never read as Rich markup.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_console()
    if style:
        console.print(escape(message), style=style)
    else:
        console.print(escape(message))
