"""Command: evaluate one date expression."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from datexpr.commands._base import DatexprCommand

if TYPE_CHECKING:
    from datexpr.commands._context import AppContext


def _load_json(value: str | None, param: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        msg = f"not valid JSON ({exc.msg})"
        raise click.BadParameter(msg, param_hint=param) from exc


@click.command(
    "eval",
    cls=DatexprCommand,
    examples="""\
  datexpr eval '["$date", "UnixEpochMs", "2021-02-12T12:34:15.020Z"]'
  datexpr eval '["$dateStartOf", ["month", "utc"]]' --value '"2021-02-12T12:34:15.020Z"'
  datexpr eval '["$dateIsValid", "2021-02-30"]'
  datexpr --zone America/Sao_Paulo eval '["$dateNow", "ISODate"]'
  datexpr --json eval '["$dateMoveForward", {"months": 1}, null, "2021-01-31"]'""",
)
@click.argument("expression")
@click.option("--value", "value", default=None, help="JSON-encoded current value ($$VALUE).")
@click.pass_obj
def eval_cmd(app: AppContext, expression: str, value: str | None) -> None:
    """Evaluate a JSON-encoded EXPRESSION and print its result."""
    parsed = _load_json(expression, "EXPRESSION")
    current = _load_json(value, "--value")
    app.evaluate(parsed, current)
