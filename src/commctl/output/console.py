"""Rich Console factory and theme for commctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

COMM_THEME = Theme(
    {
        "comm.ok": "bold green",
        "comm.error": "bold red",
        "comm.warning": "bold yellow",
        "comm.op": "bold cyan",
        "comm.key": "dim",
        "comm.id": "bold blue",
        "comm.name": "bold",
        "comm.price": "magenta",
        "comm.status.pending": "yellow",
        "comm.status.accepted": "cyan",
        "comm.status.artwork_submitted": "blue",
        "comm.status.approved": "green",
        "comm.status.rejected": "red",
        "comm.status.cancelled": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=COMM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a commission status."""
    style = f"comm.status.{status}"
    return style if style in COMM_THEME.styles else ""
