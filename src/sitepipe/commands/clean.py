"""Command: remove compiled artifacts from the output tree."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitepipe.commands._base import PipeCommand

if TYPE_CHECKING:
    from sitepipe.commands._context import AppContext


@click.command(cls=PipeCommand, examples="  sitepipe clean")
@click.pass_obj
def clean(app: AppContext) -> None:
    """Delete compiled css, js and source maps (markup is kept)."""
    from sitepipe.services.clean import Cleaner

    app.emit(Cleaner(app.project).run())
