"""BaseStage: abstract foundation for all pipeline stages.

Every stage receives a :class:`Project` at construction time and exposes a
single ``run()`` returning a :class:`StageResult`. Stages own disjoint sets
of output paths, so instances may run concurrently on worker threads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import structlog

if TYPE_CHECKING:
    from pathlib import Path

    from sitepipe.infrastructure.project import Project
    from sitepipe.services.pipeline import Stage
    from sitepipe.services.result import StageError, StageResult

log = structlog.get_logger(__name__)


class BaseStage:
    """Abstract base for stage classes.

    Usage::

        class StyleCompiler(BaseStage):
            name = "compile_styles"

            def run(self) -> StageResult:
                self._announce()
                ...
    """

    name: ClassVar[str] = ""

    def __init__(self, project: Project) -> None:
        self._project = project

    def run(self) -> StageResult:
        raise NotImplementedError

    def as_stage(self) -> Stage:
        """Wrap this stage as a node for the pipeline combinators."""
        from sitepipe.services.pipeline import Stage

        return Stage(name=self.name, run=self.run)

    def _announce(self) -> None:
        log.info("stage.start", stage=self.name)

    def _rel(self, path: Path) -> str:
        return self._project.relative(path)

    def _recover(self, error: StageError, recovered: list[StageError]) -> None:
        """Log a non-blocking error and keep it on the result."""
        log.error("stage.error", stage=self.name, code=error.code, error=error.message)
        recovered.append(error)
