"""Subcommand modules for sitepipe.

Provides register_commands() which uses deferred imports so
``sitepipe --help`` does not load the compilers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the pipeline entry points on the root CLI group."""
    from sitepipe.commands.build import build
    from sitepipe.commands.clean import clean
    from sitepipe.commands.dev import dev
    from sitepipe.commands.lint import lint

    cli.add_command(dev)
    cli.add_command(build)
    cli.add_command(lint)
    cli.add_command(clean)
