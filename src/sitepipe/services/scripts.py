"""ScriptTranspiler: the application entry script -> browser-compatible JS.

Transpiling is delegated to the Babel command line tool, run once per build
with the entry script as its only input. The compiled code is read from
stdout; Babel's own diagnostics arrive on stderr.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

import structlog

from sitepipe.infrastructure.filesystem import write_text
from sitepipe.infrastructure.tools import first_line, run_tool
from sitepipe.services.base import BaseStage
from sitepipe.services.result import StageError, StageResult
from sitepipe.services.telemetry import traced

if TYPE_CHECKING:
    from pathlib import Path

log = structlog.get_logger(__name__)


class TranspileError(Exception):
    """Babel could not be run, or rejected the source."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class ScriptTranspiler(BaseStage):
    """Run Babel over the entry script. No bundling, no linting."""

    name = "compile_scripts"

    def command(self, entry: Path) -> list[str]:
        scripts = self._project.settings.scripts
        args = [*scripts.babel, str(entry)]
        if scripts.presets:
            args += ["--presets", ",".join(scripts.presets)]
        return args

    def transpile(self, entry: Path) -> str:
        """Return the transpiled source of *entry*.

        Raises:
            TranspileError: if the Babel executable is missing or exits non-zero.
        """
        try:
            proc = run_tool(self.command(entry), cwd=self._project.root)
        except OSError as exc:
            raise TranspileError("SCRIPT_TRANSPILER_MISSING", str(exc)) from exc
        except subprocess.CalledProcessError as exc:
            headline = first_line(exc.stderr, f"exit status {exc.returncode}")
            raise TranspileError("SCRIPT_TRANSPILE_ERROR", headline) from exc
        return proc.stdout

    @traced
    def run(self) -> StageResult:
        self._announce()
        entry = self._project.script_entry
        if not entry.is_file():
            log.warning("scripts.entry_missing", path=self._rel(entry))
            return StageResult(
                ok=True,
                op=self.name,
                data={"outputs": []},
                warnings=[f"No script entry at {self._rel(entry)}"],
            )

        try:
            code = self.transpile(entry)
        except TranspileError as exc:
            log.error("scripts.transpile_error", path=self._rel(entry), error=str(exc))
            return StageResult(
                ok=False,
                op=self.name,
                error=StageError(
                    code=exc.code,
                    message=f"{self._rel(entry)}: {exc}",
                    detail={"path": self._rel(entry)},
                ),
            )

        dest = write_text(self._project.compiled_script, code)
        return StageResult(ok=True, op=self.name, data={"outputs": [self._rel(dest)]})
