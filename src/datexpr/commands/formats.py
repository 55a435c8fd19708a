"""Command: list the registered format tags."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from datexpr.commands._base import DatexprCommand

if TYPE_CHECKING:
    from datexpr.commands._context import AppContext

_EXAMPLE_OPTIONS: dict[str, Any] = {
    "CalendarInstantProperty": "weekNumber",
}


@click.command(
    cls=DatexprCommand,
    examples="""\
  datexpr formats
  datexpr formats --date 2021-02-12T12:34:15.020Z
  datexpr --zone utc formats --date 2021-02-12T12:34:15.020Z""",
)
@click.option("--date", "date_value", default=None, help="ISO date to render (default: now).")
@click.pass_obj
def formats(app: AppContext, date_value: str | None) -> None:
    """Show every format tag with an example rendering."""
    from datexpr.calendar.instant import CalendarInstant
    from datexpr.codec.registry import FORMAT_CODECS, parse, serialize

    instant = parse(date_value) if date_value is not None else CalendarInstant.now()
    if not instant.is_valid:
        msg = f"{date_value!r} is not a valid ISO date"
        raise click.BadParameter(msg, param_hint="--date")

    rows = []
    for tag, (decoder, _) in FORMAT_CODECS.items():
        request = [tag, _EXAMPLE_OPTIONS[tag]] if tag in _EXAMPLE_OPTIONS else tag
        kind = "output" if decoder is None else "input/output"
        rows.append((str(tag), kind, serialize(instant, request)))
    app.emit_rows(rows)
