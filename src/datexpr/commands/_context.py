"""AppContext: the object every subcommand receives via ``@click.pass_obj``.

It owns the invocation's settings and is the only place that writes
results, so output mode (human or ``--json``) and exit codes are decided
once.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import click

from datexpr.config.logging import configure_logging
from datexpr.expressions.result import run_expression
from datexpr.output.formatters import FormatRow, format_result, format_table

if TYPE_CHECKING:
    from datexpr.config.settings import DatexprSettings
    from datexpr.expressions.result import ExpressionResult


class AppContext:
    """Settings plus output routing for one CLI invocation."""

    def __init__(self, settings: DatexprSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def evaluate(self, expression: Any, value: Any = None) -> None:
        """Evaluate *expression* against *value* and emit the result."""
        self.emit(run_expression(expression, value))

    def emit(self, result: ExpressionResult) -> None:
        """Success goes to stdout; failure goes to stderr and exits with code 1."""
        output = format_result(result, json_output=self.settings.json_output)
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)
        click.echo(output)

    def emit_rows(self, rows: Iterable[FormatRow]) -> None:
        click.echo(format_table(rows, json_output=self.settings.json_output))
