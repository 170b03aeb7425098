"""Shared pytest fixtures and test helpers for sitepipe tests."""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sitepipe.config.settings import SitepipeSettings
from sitepipe.infrastructure.project import Project
from sitepipe.services.telemetry import _current_span, disable_telemetry

MAIN_SCSS = """\
@import "variables";

.header {
  color: $brand;
  user-select: none;
}
"""

VARIABLES_SCSS = "$brand: #336699;\n"

APP_JS = """\
const greet = (name) => "Hello " + name;
document.title = greet("site");
"""

VENDOR_CSS = ".btn {\n  color: red;\n}\n"

INDEX_HTML = """\
<!doctype html>
<html>
<head>
  <!-- build:css -->
  <link rel="stylesheet" href="assets/css/main.css">
  <!-- endbuild -->
</head>
<body>
  <!-- build:js -->
  <script src="assets/js/app.js"></script>
  <!-- endbuild -->
</body>
</html>
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """``-v`` enables telemetry on the test thread's context; undo it."""
    yield
    disable_telemetry()
    _current_span.set(None)


class FakeTools:
    """Stand-ins for the Node tools, picked by executable name.

    Babel echoes the entry script, postcss prefixes ``user-select`` in place,
    terser collapses whitespace and rejects unbalanced brackets, and the
    linters print whatever report a test assigns. A command naming none of
    these fails to start, like a missing executable.
    """

    NAMES = ("babel", "postcss", "sass-lint", "jshint", "terser")

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.envs: dict[str, Any] = {}
        self.style_report: list[dict[str, Any]] = []
        self.script_report = ""
        self.failures: dict[str, str] = {}

    def called(self, tool: str) -> list[list[str]]:
        return [command for command in self.calls if self._tool(command) == tool]

    @classmethod
    def _tool(cls, command: list[str]) -> str | None:
        return next((Path(arg).name for arg in command if Path(arg).name in cls.NAMES), None)

    def __call__(
        self,
        command: list[str],
        *,
        input: str | None = None,
        env: Any = None,
        check: bool = False,
        **kwargs: Any,
    ) -> subprocess.CompletedProcess[str]:
        tool = self._tool(command)
        if tool is None:
            raise FileNotFoundError(2, "No such file or directory", command[0])
        self.calls.append(list(command))
        self.envs[tool] = env
        if tool in self.failures:
            returncode, stdout, stderr = 1, "", self.failures[tool]
        else:
            handler = getattr(self, "_" + tool.replace("-", "_"))
            returncode, stdout, stderr = handler(command, input)
        if check and returncode:
            raise subprocess.CalledProcessError(returncode, command, output=stdout, stderr=stderr)
        return subprocess.CompletedProcess(command, returncode, stdout=stdout, stderr=stderr)

    def _babel(self, command: list[str], input: str | None) -> tuple[int, str, str]:
        entry = next(arg for arg in command if arg.endswith(".js"))
        return 0, Path(entry).read_text().replace("const ", "var "), ""

    def _postcss(self, command: list[str], input: str | None) -> tuple[int, str, str]:
        target = Path(next(arg for arg in command if arg.endswith(".css")))
        target.write_text(
            target.read_text().replace(
                "user-select: none;", "-webkit-user-select: none;\n  user-select: none;"
            )
        )
        return 0, "", ""

    def _sass_lint(self, command: list[str], input: str | None) -> tuple[int, str, str]:
        return 0, json.dumps(self.style_report), ""

    def _jshint(self, command: list[str], input: str | None) -> tuple[int, str, str]:
        return (2 if self.script_report else 0), self.script_report, ""

    def _terser(self, command: list[str], input: str | None) -> tuple[int, str, str]:
        code = input or ""
        if code.count("(") != code.count(")") or code.count("{") != code.count("}"):
            return 1, "", "Parse error at 0:1,9\nERROR: Unexpected token: punc ({)"
        return 0, " ".join(code.split()), ""


@pytest.fixture(autouse=True)
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    """Every tool process goes to :class:`FakeTools`; tests never spawn Node."""
    tools = FakeTools()
    monkeypatch.setattr("sitepipe.infrastructure.tools.subprocess.run", tools)
    return tools


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary site with the default source and output layout.

    This is the single source of truth for the site layout. All
    project-related fixtures (project, _isolated_project) build on this.
    """
    for name in list(os.environ):
        if name.startswith("SITEPIPE_"):
            monkeypatch.delenv(name)

    styles = tmp_path / "src" / "assets" / "scss"
    scripts = tmp_path / "src" / "assets" / "js"
    vendor = tmp_path / "src" / "assets" / "vendor" / "css"
    for directory in (styles, scripts, vendor, tmp_path / "dist"):
        directory.mkdir(parents=True)

    (styles / "main.scss").write_text(MAIN_SCSS)
    (styles / "_variables.scss").write_text(VARIABLES_SCSS)
    (scripts / "app.js").write_text(APP_JS)
    (vendor / "bootstrap.css").write_text(VENDOR_CSS)
    (tmp_path / "dist" / "index.html").write_text(INDEX_HTML)
    return tmp_path


@pytest.fixture
def project(project_root: Path) -> Project:
    """Project over the temporary site, default settings."""
    return Project(SitepipeSettings.from_cli(project_root=project_root))


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temporary site so the CLI resolves paths there.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.chdir(project_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_project(root: Path, toml: str = "") -> Project:
    """Project over *root* with ``sitepipe.toml`` content *toml*."""
    if toml:
        (root / "sitepipe.toml").write_text(toml)
    return Project(SitepipeSettings.from_cli(project_root=root))
