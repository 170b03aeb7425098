"""Command: production build, then an optional preview server."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitepipe.commands._base import PipeCommand

if TYPE_CHECKING:
    from sitepipe.commands._context import AppContext


@click.command(
    cls=PipeCommand,
    examples="""\
  # Build, then keep serving the result (Ctrl-C to stop)
  sitepipe build

  # Build and exit (CI)
  sitepipe build --no-preview

  # Fail the build on compile or minify errors instead of logging them
  sitepipe build --no-preview --strict""",
)
@click.option(
    "--preview/--no-preview",
    default=None,
    help="Serve the output after building (default from [build] preview).",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat recovered compile/minify errors as failures.",
)
@click.pass_obj
def build(app: AppContext, preview: bool | None, strict: bool) -> None:
    """Compile, minify, rewrite markup references, then preview."""
    from sitepipe.services.pipelines import build_graph

    result = app.runner(strict=strict or None).run("build", build_graph(app.project))
    app.emit(result)

    if preview is None:
        preview = app.settings.build.preview
    if preview:
        # Runs until interrupted, so the command never returns on its own.
        app.server().start()
