"""Style and script linting stages, run by sass-lint and jshint.

The two linters are deliberately asymmetric:

* ``lint_styles`` fails on any violation, which stops the lint pipeline and
  exits non-zero.
* ``lint_scripts`` is advisory: violations become warnings and the stage
  succeeds.

Either stage fails when its tool cannot be run at all.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING, Any

import structlog
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from sitepipe.domain.lint import Violation, parse_json_report, parse_unix_report
from sitepipe.infrastructure.filesystem import find_all_style_sources, find_scripts, read_text
from sitepipe.infrastructure.tools import first_line, run_tool
from sitepipe.services.base import BaseStage
from sitepipe.services.result import StageError, StageResult
from sitepipe.services.telemetry import traced

if TYPE_CHECKING:
    from pathlib import Path

log = structlog.get_logger(__name__)

# jshint exits 2 when it reports problems.
_JSHINT_FOUND_PROBLEMS = 2


def _log_violation(violation: Violation) -> None:
    log.warning(
        "lint.violation",
        path=violation.path,
        line=violation.line,
        column=violation.column,
        rule=violation.rule,
        severity=violation.severity,
        message=violation.message,
    )


def _failure(op: str, code: str, message: str, **detail: Any) -> StageResult:
    return StageResult(
        ok=False, op=op, error=StageError(code=code, message=message, detail=detail)
    )


def _tool_failure(op: str, tool: str, exc: Exception) -> StageResult:
    if isinstance(exc, OSError):
        return _failure(op, "LINTER_MISSING", f"Cannot run {tool}: {exc}", tool=tool)
    stderr = getattr(exc, "stderr", None)
    return _failure(op, "LINT_TOOL_ERROR", f"{tool}: {first_line(stderr, str(exc))}", tool=tool)


class StyleLinter(BaseStage):
    """Lint every style source with sass-lint and the project's rule file."""

    name = "lint_styles"

    def load_rules(self) -> dict[str, Any]:
        """Rules configured in the YAML rule file; empty when it is absent.

        Raises:
            YAMLError: if the file is not valid YAML.
            ValueError: if the file or its ``rules`` entry is not a mapping.
        """
        config_path = self._project.style_lint_config
        if not config_path.is_file():
            log.debug("lint.default_rules", stage=self.name, missing=self._rel(config_path))
            return {}
        data = YAML(typ="safe").load(read_text(config_path)) or {}
        if not isinstance(data, dict) or not isinstance(data.get("rules", {}), dict):
            msg = "expected a mapping with a 'rules' mapping"
            raise ValueError(msg)
        return dict(data.get("rules", {}))

    def command(self) -> list[str]:
        config_path = self._project.style_lint_config
        sass_lint = self._project.settings.lint.sass_lint
        args = [*sass_lint, "--format", "json", "--verbose", "--no-exit"]
        if config_path.is_file():
            args += ["--config", str(config_path)]
        return [*args, f"{self._rel(self._project.styles_dir)}/**/*.scss"]

    @traced
    def run(self) -> StageResult:
        self._announce()
        config_path = self._project.style_lint_config
        try:
            rules = self.load_rules()
        except (YAMLError, ValueError) as exc:
            return _failure(
                self.name,
                "LINT_CONFIG_INVALID",
                f"Invalid lint configuration in {self._rel(config_path)}: {exc}",
                path=self._rel(config_path),
            )

        files = find_all_style_sources(self._project.styles_dir)
        data: dict[str, Any] = {"files": len(files), "rules": sorted(rules)}
        if not files:
            return StageResult(ok=True, op=self.name, data={**data, "violations": [], "count": 0})

        try:
            proc = run_tool(self.command(), cwd=self._project.root)
            violations = parse_json_report(proc.stdout, self._tool_path)
        except (OSError, subprocess.CalledProcessError) as exc:
            return _tool_failure(self.name, "sass-lint", exc)
        except ValueError as exc:
            return _failure(self.name, "LINT_TOOL_ERROR", f"sass-lint: unreadable report ({exc})")

        for violation in violations:
            _log_violation(violation)

        data.update(violations=[v.to_dict() for v in violations], count=len(violations))
        if violations:
            affected = len({v.path for v in violations})
            return StageResult(
                ok=False,
                op=self.name,
                data=data,
                error=StageError(
                    code="STYLE_LINT_FAILED",
                    message=f"{len(violations)} style violation(s) in {affected} file(s)",
                    detail={"count": len(violations)},
                ),
            )
        return StageResult(ok=True, op=self.name, data=data)

    def _tool_path(self, path: str) -> str:
        return self._rel(self._project.root / path)


class ScriptLinter(BaseStage):
    """Lint top-level scripts with jshint. Never fails on violations."""

    name = "lint_scripts"

    def command(self, files: list[Path]) -> list[str]:
        config_path = self._project.script_lint_config
        args = [*self._project.settings.lint.jshint, "--reporter", "unix", "--verbose"]
        if config_path.is_file():
            args += ["--config", str(config_path)]
        return [*args, *(self._rel(path) for path in files)]

    @traced
    def run(self) -> StageResult:
        self._announce()
        files = find_scripts(self._project.scripts_dir)
        if not files:
            return StageResult(
                ok=True, op=self.name, data={"files": 0, "violations": [], "count": 0}
            )

        try:
            proc = run_tool(self.command(files), cwd=self._project.root, check=False)
        except OSError as exc:
            return _tool_failure(self.name, "jshint", exc)
        if proc.returncode not in (0, _JSHINT_FOUND_PROBLEMS):
            headline = first_line(proc.stderr or proc.stdout, f"exit status {proc.returncode}")
            return _failure(self.name, "LINT_TOOL_ERROR", f"jshint: {headline}", tool="jshint")

        violations = parse_unix_report(
            proc.stdout, lambda path: self._rel(self._project.root / path)
        )
        return StageResult(
            ok=True,
            op=self.name,
            data={
                "files": len(files),
                "violations": [v.to_dict() for v in violations],
                "count": len(violations),
            },
            warnings=[str(v) for v in violations],
        )
