"""Rich Console factory and theme for monoboot output.

Result text renders into a StringIO buffer to keep the
``format_result() -> str`` contract. Progress bars draw on stderr. In
non-TTY environments (tests, pipes) Rich disables color codes itself.
"""

from __future__ import annotations

import sys
from io import StringIO

from rich.console import Console
from rich.theme import Theme

MONO_THEME = Theme(
    {
        "mono.ok": "bold green",
        "mono.error": "bold red",
        "mono.warning": "bold yellow",
        "mono.op": "bold cyan",
        "mono.key": "dim",
        "mono.name": "bold blue",
        "mono.version": "magenta",
        "mono.path": "dim",
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
        theme=MONO_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def create_stderr_console() -> Console:
    """Console attached to stderr, for live progress rendering."""
    return Console(file=sys.stderr, theme=MONO_THEME, highlight=False)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
