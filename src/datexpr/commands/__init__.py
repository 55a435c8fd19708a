"""Subcommand modules for datexpr.

Provides register_commands() which uses deferred imports to keep
``datexpr --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from datexpr.commands.evaluate import eval_cmd
    from datexpr.commands.formats import formats

    cli.add_command(eval_cmd)
    cli.add_command(formats)
