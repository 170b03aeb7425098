"""Tests for the format_result dispatcher and OutputSettings."""

import json

from sitepipe.output.formatters import OutputSettings, format_result
from sitepipe.services.result import StageError, StageResult


def _ok(op: str = "test", **data: object) -> StageResult:
    return StageResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> StageResult:
    return StageResult(ok=False, op=op, error=StageError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False


class TestFormatResultJSON:
    def test_json_mode_returns_valid_json(self) -> None:
        output = format_result(_ok("clean", count=2), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is True
        assert data["op"] == "clean"
        assert data["data"]["count"] == 2
        assert data["kind"] == "success"

    def test_json_mode_error(self) -> None:
        output = format_result(_err("build", "Bad"), settings=OutputSettings(json_output=True))
        data = json.loads(output)
        assert data["ok"] is False
        assert data["kind"] == "failed"
        assert data["error"]["message"] == "Bad"

    def test_json_includes_recovered(self) -> None:
        result = StageResult(
            ok=True,
            op="compile_styles",
            recovered=[StageError(code="STYLE_COMPILE_ERROR", message="main.scss: bad")],
        )
        data = json.loads(format_result(result, settings=OutputSettings(json_output=True)))
        assert data["kind"] == "recovered"
        assert data["recovered"][0]["code"] == "STYLE_COMPILE_ERROR"


class TestFormatResultModes:
    def test_default_settings_render_human(self) -> None:
        first = format_result(_ok("clean", count=0)).splitlines()[0]
        assert first.startswith("OK")
        assert first.rstrip().endswith("clean")

    def test_quiet(self) -> None:
        assert format_result(_ok("clean"), settings=OutputSettings(quiet=True)) == "OK: clean"

    def test_json_wins_over_quiet(self) -> None:
        output = format_result(_ok(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["ok"] is True
