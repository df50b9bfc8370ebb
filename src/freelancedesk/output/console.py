"""Rich Console factory and theme for freelancedesk output.

Consoles render into a StringIO buffer so ``format_result()`` can keep
returning a plain string.  In non-TTY environments (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DESK_THEME = Theme(
    {
        "desk.ok": "bold green",
        "desk.error": "bold red",
        "desk.warning": "bold yellow",
        "desk.op": "bold cyan",
        "desk.key": "dim",
        "desk.id": "bold blue",
        "desk.title": "bold",
        "desk.money": "green",
        "desk.muted": "dim",
        "desk.priority.high": "bold red",
        "desk.priority.medium": "yellow",
        "desk.priority.low": "dim",
        "desk.insight.success": "green",
        "desk.insight.warning": "yellow",
        "desk.insight.alert": "bold red",
        "desk.insight.info": "cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=DESK_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_priority(priority: str) -> str:
    return f"desk.priority.{priority}" if priority in ("high", "medium", "low") else ""


def style_for_insight(kind: str) -> str:
    if kind in ("success", "warning", "alert", "info"):
        return f"desk.insight.{kind}"
    return ""
