"""Violations reported by the external linters.

sass-lint writes an ESLint-style JSON report (``--format json``)::

    [{"filePath": "src/assets/scss/main.scss",
      "messages": [{"ruleId": "no-ids", "severity": 2, "line": 3,
                    "column": 1, "message": "ID selectors not allowed"}]}]

jshint's ``unix`` reporter with ``--verbose`` writes one line per problem::

    src/assets/js/app.js:4:12: Missing semicolon. (W033)
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"

# sass-lint severities; 0 means the rule is off and is never reported.
_SEVERITIES = {1: SEVERITY_WARNING, 2: SEVERITY_ERROR}

_UNIX_LINE = re.compile(
    r"^(?P<path>.+?):(?P<line>\d+):(?P<column>\d+): (?P<message>.*?)"
    r"(?: \((?P<code>[EWI]\d{3})\))?$"
)


@dataclass(frozen=True)
class Violation:
    """One rule violation at a source location (1-based line and column)."""

    path: str
    line: int
    column: int
    rule: str
    message: str
    severity: str = SEVERITY_WARNING

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column} {self.message} ({self.rule})"


def parse_json_report(text: str, relative: Callable[[str], str]) -> list[Violation]:
    """Violations from an ESLint-style JSON report.

    *relative* maps the tool's file paths to the paths sitepipe reports.

    Raises:
        ValueError: if *text* is not a JSON list of file results.
    """
    data = json.loads(text or "[]")
    if not isinstance(data, list):
        msg = "expected a JSON list of file results"
        raise ValueError(msg)
    violations: list[Violation] = []
    for entry in data:
        path = relative(str(entry.get("filePath", "")))
        for message in entry.get("messages", []):
            violations.append(
                Violation(
                    path=path,
                    line=int(message.get("line") or 0),
                    column=int(message.get("column") or 0),
                    rule=str(message.get("ruleId") or "unknown"),
                    message=str(message.get("message", "")).strip(),
                    severity=_SEVERITIES.get(message.get("severity"), SEVERITY_WARNING),
                )
            )
    return violations


def parse_unix_report(text: str, relative: Callable[[str], str]) -> list[Violation]:
    """Violations from jshint's ``unix`` reporter; summary lines are skipped."""
    violations: list[Violation] = []
    for line in text.splitlines():
        match = _UNIX_LINE.match(line.strip())
        if match is None:
            continue
        code = match.group("code") or ""
        violations.append(
            Violation(
                path=relative(match.group("path")),
                line=int(match.group("line")),
                column=int(match.group("column")),
                rule=code or "jshint",
                message=match.group("message"),
                severity=SEVERITY_ERROR if code.startswith("E") else SEVERITY_WARNING,
            )
        )
    return violations
