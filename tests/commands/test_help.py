"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from datexpr.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["eval", "formats", "--json", "--zone", "--log-json"]),
    (["eval", "--help"], ["EXPRESSION", "--value"]),
    (["formats", "--help"], ["--date"]),
]


@pytest.mark.parametrize(
    "args,expected_keywords",
    HELP_COMMANDS,
    ids=["_".join(args) for args, _ in HELP_COMMANDS],
)
def test_help(cli_runner: CliRunner, args: list[str], expected_keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in help output for {args}"
