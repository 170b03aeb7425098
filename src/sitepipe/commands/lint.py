"""Command: lint styles (blocking), then scripts (advisory)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitepipe.commands._base import PipeCommand

if TYPE_CHECKING:
    from sitepipe.commands._context import AppContext


@click.command(
    cls=PipeCommand,
    examples="""\
  sitepipe lint
  sitepipe --json lint""",
)
@click.pass_obj
def lint(app: AppContext) -> None:
    """Run the style linter, then the script linter if styles pass."""
    from sitepipe.services.pipelines import lint_graph

    app.emit(app.runner().run("lint", lint_graph(app.project)))
