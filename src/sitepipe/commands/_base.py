"""Click base classes carrying an on-demand ``--examples`` flag.

``--help`` stays short; ``sitepipe build --examples`` prints typical
invocations and exits before the command body (or any pipeline) runs.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesMixin:
    """Accept ``examples=`` and expose it as an eager ``--examples`` option."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class PipeCommand(ExamplesMixin, click.Command):
    pass


class PipeGroup(ExamplesMixin, click.Group):
    """Root group; subcommands default to :class:`PipeCommand`."""

    command_class = PipeCommand
