"""Root CLI group for sitepipe with global flags and command registration."""

from __future__ import annotations

import click

from sitepipe import __version__
from sitepipe.commands import register_commands
from sitepipe.commands._base import PipeGroup
from sitepipe.commands._context import AppContext
from sitepipe.config.settings import SitepipeSettings


@click.group(
    cls=PipeGroup,
    invoke_without_command=True,
    examples="""\
  sitepipe dev
  sitepipe build --no-preview
  sitepipe lint
  sitepipe -c site/sitepipe.toml --json build --no-preview""",
)
@click.version_option(version=__version__, prog_name="sitepipe")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """sitepipe: compile, lint, minify and serve front-end assets."""
    ctx.ensure_object(dict)
    settings = SitepipeSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)