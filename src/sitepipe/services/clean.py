"""Clean: remove compiled artifacts so the output tree can be rebuilt."""

from __future__ import annotations

from sitepipe.infrastructure.filesystem import remove_derived
from sitepipe.services.base import BaseStage
from sitepipe.services.result import StageResult
from sitepipe.services.telemetry import traced


class Cleaner(BaseStage):
    """Delete css, js and map files from the output style and script directories.

    Markup and vendor libraries copied into subfolders of the output tree
    are kept.
    """

    name = "clean"

    @traced
    def run(self) -> StageResult:
        self._announce()
        directories = sorted(
            {self._project.output_styles_dir, self._project.output_scripts_dir}
        )
        removed = remove_derived(directories)
        return StageResult(
            ok=True,
            op=self.name,
            data={"removed": [self._rel(p) for p in removed], "count": len(removed)},
        )
