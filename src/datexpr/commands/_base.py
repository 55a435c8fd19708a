"""Click base classes carrying an ``--examples`` flag.

``--help`` stays short; worked invocations live behind ``--examples``,
which is eager so it works even when required arguments are missing.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesOption(click.Option):
    """Eager ``--examples`` flag that prints the command's examples and exits."""

    def __init__(self, examples: str) -> None:
        self.examples = examples
        super().__init__(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=self._show,
            help="Show usage examples and exit.",
        )

    def _show(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class _ExamplesMixin:
    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(ExamplesOption(examples))


class DatexprCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=`` text."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class DatexprGroup(_ExamplesMixin, click.Group):
    """Group accepting ``examples=`` text; its subcommands default to DatexprCommand."""

    command_class = DatexprCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
