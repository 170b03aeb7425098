"""AppContext: what every sitepipe command receives via ``@click.pass_obj``.

The root group builds one per invocation. It configures logging up front,
creates the :class:`Project` only when a command needs paths (so ``--help``
never touches the disk), and owns the stdout/stderr/exit-code contract.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitepipe.config.logging import configure_logging
from sitepipe.output.formatters import OutputSettings, format_result
from sitepipe.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sitepipe.config.settings import SitepipeSettings
    from sitepipe.infrastructure.project import Project
    from sitepipe.infrastructure.server import DevServer, WatchRule
    from sitepipe.services.pipeline import PipelineRunner
    from sitepipe.services.result import StageResult


class AppContext:
    def __init__(self, settings: SitepipeSettings) -> None:
        self.settings = settings
        self._project: Project | None = None
        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
        )
        if settings.verbose:
            enable_telemetry()

    @property
    def project(self) -> Project:
        if self._project is None:
            from sitepipe.infrastructure.project import Project

            self._project = Project(self.settings)
        return self._project

    @property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def runner(self, *, strict: bool | None = None) -> PipelineRunner:
        """Pipeline runner from ``[build]``; an explicit *strict* wins."""
        from sitepipe.services.pipeline import PipelineRunner

        build = self.settings.build
        return PipelineRunner(
            strict=build.strict if strict is None else strict,
            max_workers=build.max_workers,
        )

    def server(self, rules: Sequence[WatchRule] = ()) -> DevServer:
        """Dev server over the output root; *rules* enable watching."""
        from sitepipe.infrastructure.server import DevServer

        return DevServer(self.project.output_root, self.settings.server, rules=rules)

    def emit(self, result: StageResult) -> None:
        """Print *result*; exit 1 if it failed.

        Successful results go to stdout and their warnings to stderr as
        ``WARNING:`` lines (JSON carries them in the payload instead).
        Failed results go to stderr only, so stdout stays empty.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if not self.settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
