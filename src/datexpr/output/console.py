"""Rich rendering helpers for datexpr output.

Everything renders into an in-memory buffer and comes back as text, so
the CLI decides where it goes (stdout or stderr) and tests compare plain
strings. Rich drops color codes on its own when the buffer is not a TTY.
"""

from __future__ import annotations

import math
from io import StringIO
from typing import Any

from rich.console import Console, RenderableType
from rich.theme import Theme

DEFAULT_WIDTH = 120

DATEXPR_THEME = Theme(
    {
        "dx.ok": "bold green",
        "dx.error": "bold red",
        "dx.op": "bold cyan",
        "dx.key": "dim",
        "dx.tag": "bold blue",
        "dx.value": "bold",
        "dx.number": "magenta",
        "dx.bool": "yellow",
        "dx.invalid": "dim red",
    }
)


def style_for_value(value: Any) -> str:
    """Theme style for an evaluated value; missing and NaN read as invalid."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "dx.invalid"
    if isinstance(value, bool):
        return "dx.bool"
    if isinstance(value, (int, float)):
        return "dx.number"
    return "dx.value"


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed Console writing into a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=DATEXPR_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render(*lines: RenderableType, width: int | None = None) -> str:
    """Print each renderable on its own line and return the text, minus the final newline."""
    console = create_console(width=width)
    for line in lines:
        console.print(line)
    return get_output(console).rstrip("\n")
