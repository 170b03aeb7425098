"""Human-readable rendering of StageResult.

Layout::

    OK  build  (with recovered errors)
    <body: stage table, violation table, or key: value fields>
      recovered errors:
        src/assets/scss/main.scss: Invalid CSS after ...
    <meta and span tree, --verbose only>

Pipeline results (``dev``, ``build``, ``lint``) get one row per stage,
skipped stages included. Lint stages list their violations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.text import Text

from sitepipe.output.console import create_console, get_output, make_table, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from sitepipe.services.result import StageResult

Body = Callable[["StageResult", "Console", bool], None]


def render_result(result: StageResult, *, verbose: bool = False) -> str:
    """Render *result* as plain text (styled when written to a terminal)."""
    console = create_console()
    _headline(console, result)
    _BODIES.get(result.op, _fields)(result, console, verbose)

    if result.recovered:
        console.print(Text("  recovered errors:", style="pipe.warning"))
        for error in result.recovered:
            console.print(f"    {error.message}", markup=False)

    if verbose and result.meta:
        _meta(console, result.meta)

    return get_output(console).rstrip("\n")


def render_quiet(result: StageResult) -> str:
    """One line for ``--quiet``."""
    if result.ok:
        return f"OK: {result.op}"
    message = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {message}"


# ── Headline ──────────────────────────────────────────────────────────


def _headline(console: Console, result: StageResult) -> None:
    op = Text(f"  {result.op}", style="pipe.op")
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        console.print(Text("ERROR", style="pipe.error"), op, Text(" — "), Text(message))
        return
    parts = [Text("OK", style="pipe.ok"), op]
    if result.kind == "recovered":
        parts.append(Text("  (with recovered errors)", style="pipe.warning"))
    console.print(*parts, sep="")


# ── Bodies ────────────────────────────────────────────────────────────


def _stage_notes(stage: dict[str, Any]) -> str:
    notes = [str(stage["error"])] if stage.get("error") else []
    notes.extend(str(message) for message in stage.get("recovered", []))
    if stage.get("warnings"):
        notes.append(f"{stage['warnings']} warning(s)")
    return "; ".join(notes)


def _pipeline(result: StageResult, console: Console, verbose: bool) -> None:
    table = make_table("Stage", "Result", "Outputs", "Notes", styles={"Stage": "pipe.op"})
    for stage in result.data.get("stages", []):
        kind = str(stage.get("kind", ""))
        table.add_row(
            str(stage.get("stage", "")),
            Text(kind, style=style_for_kind(kind)),
            str(stage.get("outputs", "")),
            Text(_stage_notes(stage)),
        )
    for name in result.data.get("skipped", []):
        table.add_row(name, Text("skipped", style=style_for_kind("skipped")), "", "")
    console.print(table)


def _violations(result: StageResult, console: Console, verbose: bool) -> None:
    violations: list[dict[str, Any]] = result.data.get("violations", [])
    _field(console, "files", result.data.get("files", 0))
    _field(console, "violations", len(violations))
    if not violations:
        return
    table = make_table(
        "Location", "Severity", "Rule", "Message",
        styles={"Location": "pipe.path", "Rule": "pipe.op"},
    )
    for v in violations:
        severity = str(v.get("severity", ""))
        table.add_row(
            f"{v.get('path')}:{v.get('line')}:{v.get('column')}",
            Text(severity, style="pipe.error" if severity == "error" else "pipe.warning"),
            str(v.get("rule", "")),
            Text(str(v.get("message", ""))),
        )
    console.print(table)


def _fields(result: StageResult, console: Console, verbose: bool) -> None:
    """Fallback: ``key: value`` per data entry; lists show their length."""
    for key, value in result.data.items():
        if not isinstance(value, list):
            _field(console, key, value)
            continue
        _field(console, key, len(value))
        if verbose:
            for item in value:
                console.print(f"    {item}", markup=False)


_BODIES: dict[str, Body] = {
    "dev": _pipeline,
    "build": _pipeline,
    "lint": _pipeline,
    "lint_styles": _violations,
    "lint_scripts": _violations,
}


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text(f"  {key}: ", style="pipe.key"), Text(str(value)), sep="")


# ── Verbose meta ──────────────────────────────────────────────────────


def _meta(console: Console, meta: dict[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in meta.items():
        if key == "telemetry":
            _span_tree(console, value, depth=1)
        else:
            console.print(f"    {key}: {value}", markup=False)


def _span_tree(console: Console, span: dict[str, Any], depth: int) -> None:
    """One line per span, children indented; slow spans are highlighted."""
    duration = float(span.get("duration_ms", 0.0))
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    line = Text("    " * depth)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span.get('name', '?')}")
    console.print(line)
    for child in span.get("children", []):
        _span_tree(console, child, depth + 1)
