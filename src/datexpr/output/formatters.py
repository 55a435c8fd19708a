"""Human and JSON rendering of evaluation results.

``--json`` dumps the :class:`ExpressionResult` model as-is; otherwise a
result becomes one status line plus the value, and ``datexpr formats``
becomes a rich table.
"""

from __future__ import annotations

import json as _json
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from datexpr.expressions.result import to_jsonable
from datexpr.output.console import render, style_for_value

if TYPE_CHECKING:
    from datexpr.expressions.result import ExpressionResult

FormatRow = tuple[str, str, Any]


def format_value(value: Any) -> Text:
    """Strings print bare; everything else as compact JSON."""
    style = style_for_value(value)
    if isinstance(value, str):
        return Text(value, style=style)
    return Text(_json.dumps(to_jsonable(value), separators=(",", ":")), style=style)


def format_result(result: ExpressionResult, *, json_output: bool = False) -> str:
    """Format an ExpressionResult for display.

    Args:
        result: The evaluation result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    if result.ok:
        return render(
            Text.assemble(("OK", "dx.ok"), "  ", (result.op, "dx.op")),
            Text.assemble(("  value: ", "dx.key"), format_value(result.value)),
        )

    code = result.error.code if result.error else "UNKNOWN"
    message = result.error.message if result.error else "Unknown error"
    return render(
        Text.assemble(("ERROR", "dx.error"), "  ", (result.op, "dx.op"), f" [{code}] ", message)
    )


def format_table(rows: Iterable[FormatRow], *, json_output: bool = False) -> str:
    """Render ``(tag, kind, example)`` rows for ``datexpr formats``."""
    rows = list(rows)
    if json_output:
        payload = [
            {"tag": tag, "kind": kind, "example": to_jsonable(example)}
            for tag, kind, example in rows
        ]
        return _json.dumps(payload, indent=2)

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Tag", style="dx.tag", no_wrap=True)
    table.add_column("Kind", style="dx.key")
    table.add_column("Example")
    for tag, kind, example in rows:
        table.add_row(tag, kind, format_value(example))
    return render(table)
