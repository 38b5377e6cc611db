"""Rich Console factory and theme for lineageflow output.

Consoles render into a StringIO buffer so formatters keep returning plain
strings. Rich drops color codes on its own when stdout is not a terminal.
"""

from __future__ import annotations

import re
from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

LINEAGE_THEME = Theme(
    {
        "lf.ok": "bold green",
        "lf.error": "bold red",
        "lf.warning": "bold yellow",
        "lf.op": "bold cyan",
        "lf.key": "dim",
        "lf.id": "bold blue",
        "lf.path": "dim",
        "lf.label": "bold",
        "lf.shape": "magenta",
    }
)

_HEX_RE = re.compile(r"#([0-9a-fA-F]{6}|[0-9a-fA-F]{3})")


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=LINEAGE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def swatch(color: str) -> str:
    """Return Rich markup showing a filled block in *color* next to its code.

    Rich only parses six-digit hex, so ``#abc`` is expanded first. Values
    that are not hex colors come back as plain (escaped) text.
    """
    match = _HEX_RE.fullmatch(color)
    if match is None:
        return escape(color)
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"[#{digits.lower()}]■[/] {color}"
