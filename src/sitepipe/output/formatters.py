"""Rich/JSON output helpers.

The CLI renders StageResult for humans (Rich tables and colors) or
machines (--json). The formatter layer picks the mode.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sitepipe.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from sitepipe.services.result import StageResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: StageResult, *, settings: OutputSettings | None = None) -> str:
    """Format a StageResult for display.

    JSON output includes the computed ``kind`` alongside the model fields.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        payload = result.model_dump(mode="json")
        payload["kind"] = result.kind
        return json.dumps(payload, indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
