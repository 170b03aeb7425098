"""StyleCompiler: SCSS sources -> vendor-prefixed CSS with source maps.

libsass compiles each entry point and writes the CSS next to its map. With
``[styles] autoprefix`` on, postcss then runs autoprefixer over the written
file in place, for the browsers in ``[styles] browsers``, and carries the
compiler's map forward through the ``sourceMappingURL`` annotation.

Compile and prefix errors are non-blocking: they are logged and recorded
under ``recovered``, and the stage still succeeds so the rest of the
pipeline runs. A file that fails to compile produces no output; a file that
fails to prefix keeps its unprefixed CSS.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

import sass

from sitepipe.infrastructure.filesystem import find_style_sources, write_text
from sitepipe.infrastructure.tools import first_line, run_tool
from sitepipe.services.base import BaseStage
from sitepipe.services.result import StageError, StageResult
from sitepipe.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from pathlib import Path


class StyleCompiler(BaseStage):
    """Compile every top-level ``*.scss`` file in the style source directory."""

    name = "compile_styles"

    @traced
    def run(self) -> StageResult:
        self._announce()
        sources = find_style_sources(self._project.styles_dir)
        autoprefix = self._project.settings.styles.autoprefix
        outputs: list[str] = []
        recovered: list[StageError] = []

        for source in sources:
            with trace_span(source.name):
                try:
                    written = self.compile_file(source)
                except sass.CompileError as exc:
                    message = str(exc).strip()
                    self._recover(
                        StageError(
                            code="STYLE_COMPILE_ERROR",
                            message=f"{self._rel(source)}: {first_line(message, 'compile error')}",
                            detail={"path": self._rel(source), "error": message},
                        ),
                        recovered,
                    )
                    continue
                if autoprefix:
                    error = self.prefix(written[0])
                    if error is not None:
                        self._recover(error, recovered)
            outputs.extend(self._rel(p) for p in written)

        return StageResult(
            ok=True,
            op=self.name,
            data={"sources": len(sources), "outputs": outputs},
            recovered=recovered,
        )

    def compile_file(self, source: Path) -> list[Path]:
        """Compile one source to ``<stem>.css`` and ``<stem>.css.map``.

        Raises:
            sass.CompileError: on syntax errors; nothing is written.
        """
        styles = self._project.settings.styles
        dest = self._project.output_styles_dir / f"{source.stem}.css"
        map_path = dest.with_name(f"{dest.name}.map")

        css, source_map = sass.compile(
            filename=str(source),
            output_style=styles.output_style,
            source_map_filename=str(map_path),
            output_filename_hint=str(dest),
            include_paths=self._project.include_paths,
        )
        write_text(dest, css)
        write_text(map_path, source_map)
        return [dest, map_path]

    def prefix_command(self, css_file: Path) -> list[str]:
        postcss = self._project.settings.styles.postcss
        return [*postcss, str(css_file), "--use", "autoprefixer", "--replace", "--map"]

    def prefix(self, css_file: Path) -> StageError | None:
        """Run autoprefixer over *css_file* in place; the error if it could not."""
        browsers = self._project.settings.styles.browsers
        try:
            run_tool(
                self.prefix_command(css_file),
                cwd=self._project.root,
                env={"BROWSERSLIST": browsers},
            )
        except OSError as exc:
            return StageError(
                code="STYLE_PREFIXER_MISSING",
                message=f"{self._rel(css_file)}: cannot run postcss: {exc}",
                detail={"path": self._rel(css_file)},
            )
        except subprocess.CalledProcessError as exc:
            headline = first_line(exc.stderr, f"exit status {exc.returncode}")
            return StageError(
                code="STYLE_PREFIX_ERROR",
                message=f"{self._rel(css_file)}: {headline}",
                detail={"path": self._rel(css_file)},
            )
        return None
