"""Root ``datexpr`` command group.

Global flags become a :class:`DatexprSettings` installed for the whole
invocation, so ``--zone`` changes what every expression means by ``local``.
"""

from __future__ import annotations

import click

from datexpr import __version__
from datexpr.commands import register_commands
from datexpr.commands._base import DatexprGroup
from datexpr.commands._context import AppContext
from datexpr.config.settings import DatexprSettings

_EXAMPLES = """\
  datexpr eval '["$dateNow", "ISODate"]'
  datexpr --zone utc eval '["$dateStartOf", "week"]' --value '"2021-02-12T12:34:15Z"'
  datexpr --json formats --date 2021-02-12T12:34:15.020Z
  datexpr -v --log-json eval '["$dateIsValid", "2021-02-30"]'"""


@click.group(cls=DatexprGroup, invoke_without_command=True, examples=_EXAMPLES)
@click.version_option(version=__version__, prog_name="datexpr")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Emit log records as JSON lines.")
@click.option(
    "--zone",
    "local_zone",
    metavar="ZONE",
    default=None,
    help="Zone that 'local' refers to, e.g. America/Sao_Paulo or UTC+1.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    local_zone: str | None,
) -> None:
    """datexpr: evaluate date expressions from the command line."""
    settings = DatexprSettings.from_cli(
        local_zone=local_zone,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
