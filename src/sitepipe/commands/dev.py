"""Command: development build, then serve with live reload."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitepipe.commands._base import PipeCommand

if TYPE_CHECKING:
    from sitepipe.commands._context import AppContext


@click.command(
    cls=PipeCommand,
    examples="""\
  # Compile, serve dist/ on http://localhost:3000 and rebuild on change
  sitepipe dev

  # Different port, no browser tab
  SITEPIPE_SERVER__PORT=8080 SITEPIPE_SERVER__OPEN_BROWSER=false sitepipe dev""",
)
@click.pass_obj
def dev(app: AppContext) -> None:
    """Compile styles and scripts, then serve and watch for changes."""
    from sitepipe.services.pipelines import dev_graph, watch_rules

    runner = app.runner()
    result = runner.run("dev", dev_graph(app.project))
    app.emit(result)

    app.server(watch_rules(app.project, runner)).start()
