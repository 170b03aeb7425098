"""Production minification stages.

Both minifiers treat their errors as recoverable: the error is logged and
kept on the result, the stage succeeds, and downstream stages may see a
missing or stale artifact. ``--strict`` turns these into failures.
"""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path

import rcssmin

from sitepipe.domain.removecode import remove_code
from sitepipe.domain.sourcemap import line_per_source_map
from sitepipe.infrastructure.filesystem import find_vendor_styles, read_text, write_text
from sitepipe.infrastructure.tools import first_line, run_tool
from sitepipe.services.base import BaseStage
from sitepipe.services.result import StageError, StageResult
from sitepipe.services.telemetry import trace_span, traced


class ScriptMinifier(BaseStage):
    """Strip production-only blocks from the transpiled script, then minify it."""

    name = "minify_scripts"

    @traced
    def run(self) -> StageResult:
        self._announce()
        source = self._project.compiled_script
        recovered: list[StageError] = []

        if not source.is_file():
            self._recover(
                StageError(
                    code="MINIFY_INPUT_MISSING",
                    message=f"{self._rel(source)} does not exist",
                    detail={"path": self._rel(source)},
                ),
                recovered,
            )
            return StageResult(ok=True, op=self.name, data={"outputs": []}, recovered=recovered)

        flags = self._project.settings.scripts.remove_flags
        try:
            minified = self.minify(remove_code(read_text(source), flags))
        except OSError as exc:
            error = StageError(
                code="SCRIPT_MINIFIER_MISSING",
                message=f"{self._rel(source)}: cannot run terser: {exc}",
                detail={"path": self._rel(source)},
            )
        except subprocess.CalledProcessError as exc:
            error = StageError(
                code="SCRIPT_MINIFY_ERROR",
                message=f"{self._rel(source)}: {first_line(exc.stderr, 'minify error')}",
                detail={"path": self._rel(source), "error": (exc.stderr or "").strip()},
            )
        except (UnicodeDecodeError, ValueError) as exc:
            error = StageError(
                code="SCRIPT_MINIFY_ERROR",
                message=f"{self._rel(source)}: {exc}",
                detail={"path": self._rel(source)},
            )
        else:
            dest = write_text(self._project.minified_script, minified)
            return StageResult(ok=True, op=self.name, data={"outputs": [self._rel(dest)]})

        self._recover(error, recovered)
        return StageResult(ok=True, op=self.name, data={"outputs": []}, recovered=recovered)

    def minify(self, code: str) -> str:
        """Minify *code* with terser, read from stdin and written to stdout.

        Raises:
            OSError: if terser cannot be started.
            subprocess.CalledProcessError: if terser rejects the code.
        """
        command = [*self._project.settings.scripts.terser, "--compress", "--mangle"]
        return run_tool(command, cwd=self._project.root, input=code).stdout


class StyleMinifier(BaseStage):
    """Concatenate vendor styles and the app stylesheet, minified, with a source map.

    Vendor stylesheets come first so application rules win by source order.
    Each input is minified on its own and placed on its own line; the map
    points every line back to its input file.
    """

    name = "minify_styles"

    def inputs(self) -> list[Path]:
        """Vendor stylesheets in sorted order, then the compiled app stylesheet."""
        return [
            *find_vendor_styles(self._project.vendor_styles_dir),
            self._project.app_stylesheet,
        ]

    @traced
    def run(self) -> StageResult:
        self._announce()
        bundle = self._project.style_bundle
        map_path = bundle.with_name(f"{bundle.name}.map")
        recovered: list[StageError] = []
        chunks: list[str] = []
        included: list[Path] = []

        for path in self.inputs():
            with trace_span(path.name):
                if not path.is_file():
                    self._recover(
                        StageError(
                            code="MINIFY_INPUT_MISSING",
                            message=f"{self._rel(path)} does not exist",
                            detail={"path": self._rel(path)},
                        ),
                        recovered,
                    )
                    continue
                try:
                    minified = rcssmin.cssmin(read_text(path))
                except (UnicodeDecodeError, ValueError) as exc:
                    self._recover(
                        StageError(
                            code="STYLE_MINIFY_ERROR",
                            message=f"{self._rel(path)}: {exc}",
                            detail={"path": self._rel(path)},
                        ),
                        recovered,
                    )
                    continue
            # One input per line keeps the line-based source map exact.
            chunks.append(minified.replace("\n", " ").strip())
            included.append(path)

        if not included:
            return StageResult(ok=True, op=self.name, data={"outputs": []}, recovered=recovered)

        sources = [Path(os.path.relpath(p, bundle.parent)).as_posix() for p in included]
        source_map = line_per_source_map(bundle.name, sources)
        body = "\n".join(chunks) + f"\n/*# sourceMappingURL={map_path.name} */\n"

        write_text(bundle, body)
        write_text(map_path, json.dumps(source_map))
        return StageResult(
            ok=True,
            op=self.name,
            data={
                "inputs": [self._rel(p) for p in included],
                "outputs": [self._rel(bundle), self._rel(map_path)],
            },
            recovered=recovered,
        )
