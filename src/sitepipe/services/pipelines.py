"""The three entry-point task graphs and the dev watch rules.

=========  ===============================================================
dev        parallel(compile_scripts, compile_styles), then serve + watch
build      parallel(compile_styles, compile_scripts)
           -> parallel(minify_scripts, minify_styles) -> rewrite_markup,
           then the preview server unless disabled
lint       lint_styles -> lint_scripts (skipped if style lint fails)
=========  ===============================================================

The dev server is a long-running service, not a pipeline stage: the
commands start it after the pipeline result has been reported.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import structlog

from sitepipe.infrastructure.server import WatchRule
from sitepipe.services.lint import ScriptLinter, StyleLinter
from sitepipe.services.markup import ReferenceRewriter
from sitepipe.services.minify import ScriptMinifier, StyleMinifier
from sitepipe.services.pipeline import Node, PipelineRunner, Stage, parallel, series
from sitepipe.services.scripts import ScriptTranspiler
from sitepipe.services.styles import StyleCompiler

if TYPE_CHECKING:
    from sitepipe.infrastructure.project import Project
    from sitepipe.services.result import StageResult

log = structlog.get_logger(__name__)


def dev_graph(project: Project) -> Node:
    return parallel(
        ScriptTranspiler(project).as_stage(),
        StyleCompiler(project).as_stage(),
    )


def build_graph(project: Project) -> Node:
    return series(
        parallel(
            StyleCompiler(project).as_stage(),
            ScriptTranspiler(project).as_stage(),
        ),
        parallel(
            ScriptMinifier(project).as_stage(),
            StyleMinifier(project).as_stage(),
        ),
        ReferenceRewriter(project).as_stage(),
    )


def lint_graph(project: Project) -> Node:
    return series(
        StyleLinter(project).as_stage(),
        ScriptLinter(project).as_stage(),
    )


def _rerun(runner: PipelineRunner, stage: Stage) -> StageResult:
    """Watch callback: run *stage* and log the outcome."""
    result = runner.run_stage(stage)
    log.info("watch.rebuilt", stage=stage.name, kind=result.kind)
    return result


def watch_rules(project: Project, runner: PipelineRunner) -> list[WatchRule]:
    """Style sources (any depth) -> compile_styles, top-level scripts -> compile_scripts."""
    return [
        WatchRule(
            name=StyleCompiler.name,
            root=project.styles_dir,
            glob="*.scss",
            action=partial(_rerun, runner, StyleCompiler(project).as_stage()),
            recursive=True,
        ),
        WatchRule(
            name=ScriptTranspiler.name,
            root=project.scripts_dir,
            glob="*.js",
            action=partial(_rerun, runner, ScriptTranspiler(project).as_stage()),
        ),
    ]
