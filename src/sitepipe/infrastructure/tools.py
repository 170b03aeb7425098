"""Node command line tools the pipeline delegates to.

Babel, postcss (autoprefixer), sass-lint, jshint and terser are all run the
same way: one process per call, from the project root, text in and out.
Commands come from config as argument lists, ``npx --no-install <tool>`` by
default, so a project pins the tool versions in its own ``package.json``.
"""

from __future__ import annotations

import os
import subprocess
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

log = structlog.get_logger(__name__)


def run_tool(
    command: Sequence[str],
    *,
    cwd: Path,
    input: str | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run *command* in *cwd*; *env* is added to the inherited environment.

    Raises:
        OSError: if the executable cannot be started.
        subprocess.CalledProcessError: on a non-zero exit when *check* is set.
    """
    log.debug("tool.run", command=list(command))
    return subprocess.run(
        list(command),
        cwd=cwd,
        input=input,
        env={**os.environ, **env} if env else None,
        capture_output=True,
        text=True,
        check=check,
    )


def first_line(text: str | None, fallback: str) -> str:
    """The first non-blank line of a tool's diagnostics, for error messages."""
    for line in (text or "").splitlines():
        if line.strip():
            return line.strip()
    return fallback
