"""StageResult and StageError: the universal stage contract.

INVARIANT: Every stage and every pipeline returns a StageResult.
The CLI renderers and the pipeline runner consume this type.

A stage that hits an error it is allowed to survive (style compile errors,
minifier errors) still returns ``ok=True`` but lists the error under
``recovered``. ``kind`` exposes the three outcomes explicitly so callers
can apply stricter policies without re-deriving them.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ResultKind = Literal["success", "recovered", "failed"]


class StageError(BaseModel):
    """Structured error payload within a StageResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class StageResult(BaseModel):
    """Universal return type for stage and pipeline runs.

    Attributes:
        ok: Whether the stage succeeded (possibly after recovering).
        op: Name of the stage or pipeline (e.g. ``"compile_styles"``).
        data: Stage-specific payload (outputs, violations, child stages).
        warnings: Non-fatal notes, e.g. advisory lint violations.
        error: Structured error if ``ok`` is False.
        recovered: Errors that were logged and swallowed.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: StageError | None = None
    recovered: list[StageError] = Field(default_factory=list)
    meta: dict[str, Any] | None = None

    @property
    def kind(self) -> ResultKind:
        if not self.ok:
            return "failed"
        if self.recovered:
            return "recovered"
        return "success"

    def summary(self) -> dict[str, Any]:
        """Compact per-stage summary used inside pipeline results."""
        out: dict[str, Any] = {"stage": self.op, "kind": self.kind}
        outputs = self.data.get("outputs")
        if outputs is not None:
            out["outputs"] = len(outputs)
        if self.error is not None:
            out["error"] = self.error.message
        if self.recovered:
            out["recovered"] = [e.message for e in self.recovered]
        if self.warnings:
            out["warnings"] = len(self.warnings)
        return out
