"""Tests for StyleCompiler (libsass, then autoprefixer through postcss)."""

from __future__ import annotations

import json
from pathlib import Path

from sitepipe.infrastructure.project import Project
from sitepipe.services.styles import StyleCompiler
from tests.conftest import FakeTools, make_project


class TestStyleCompiler:
    def test_compiles_entry_points_only(self, project: Project) -> None:
        result = StyleCompiler(project).run()
        assert result.ok is True
        assert result.kind == "success"
        assert result.data["sources"] == 1
        assert result.data["outputs"] == [
            "dist/assets/css/main.css",
            "dist/assets/css/main.css.map",
        ]
        assert not (project.output_styles_dir / "_variables.css").exists()

    def test_partial_import_and_map_annotation(self, project: Project) -> None:
        StyleCompiler(project).run()
        css = (project.output_styles_dir / "main.css").read_text()
        assert "#336699" in css
        assert "sourceMappingURL=main.css.map" in css

    def test_source_map_is_json(self, project: Project) -> None:
        StyleCompiler(project).run()
        smap = json.loads((project.output_styles_dir / "main.css.map").read_text())
        assert smap["version"] == 3
        assert any(src.endswith("main.scss") for src in smap["sources"])

    def test_syntax_error_is_recovered(self, project: Project) -> None:
        (project.styles_dir / "broken.scss").write_text(".a {\n  color: red\n")
        result = StyleCompiler(project).run()
        assert result.ok is True
        assert result.kind == "recovered"
        assert len(result.recovered) == 1
        error = result.recovered[0]
        assert error.code == "STYLE_COMPILE_ERROR"
        assert error.message.startswith("src/assets/scss/broken.scss: ")
        assert not (project.output_styles_dir / "broken.css").exists()
        # Other sources still compile.
        assert (project.output_styles_dir / "main.css").exists()

    def test_missing_styles_dir(self, tmp_path: Path) -> None:
        result = StyleCompiler(make_project(tmp_path)).run()
        assert result.ok is True
        assert result.data == {"sources": 0, "outputs": []}


class TestAutoprefixer:
    def test_runs_postcss_on_each_output(self, project: Project, fake_tools: FakeTools) -> None:
        StyleCompiler(project).run()
        dest = project.output_styles_dir / "main.css"
        assert fake_tools.called("postcss") == [
            [
                *("npx", "--no-install", "postcss", str(dest)),
                *("--use", "autoprefixer", "--replace", "--map"),
            ]
        ]
        assert "-webkit-user-select: none;" in dest.read_text()

    def test_browsers_passed_through_browserslist(
        self, project_root: Path, fake_tools: FakeTools
    ) -> None:
        project = make_project(project_root, '[styles]\nbrowsers = "defaults, not IE 11"\n')
        StyleCompiler(project).run()
        assert fake_tools.envs["postcss"]["BROWSERSLIST"] == "defaults, not IE 11"

    def test_default_browsers(self, project: Project, fake_tools: FakeTools) -> None:
        StyleCompiler(project).run()
        assert fake_tools.envs["postcss"]["BROWSERSLIST"] == "last 2 versions"

    def test_disabled(self, project_root: Path, fake_tools: FakeTools) -> None:
        project = make_project(project_root, "[styles]\nautoprefix = false\n")
        StyleCompiler(project).run()
        css = (project.output_styles_dir / "main.css").read_text()
        assert "-webkit-user-select" not in css
        assert fake_tools.called("postcss") == []

    def test_failure_keeps_unprefixed_css(self, project: Project, fake_tools: FakeTools) -> None:
        fake_tools.failures["postcss"] = "CssSyntaxError: main.css:3:1: Unknown word"
        result = StyleCompiler(project).run()
        assert result.ok is True
        assert result.kind == "recovered"
        error = result.recovered[0]
        assert error.code == "STYLE_PREFIX_ERROR"
        assert error.message == (
            "dist/assets/css/main.css: CssSyntaxError: main.css:3:1: Unknown word"
        )
        assert result.data["outputs"] == [
            "dist/assets/css/main.css",
            "dist/assets/css/main.css.map",
        ]
        assert "user-select: none;" in (project.output_styles_dir / "main.css").read_text()

    def test_missing_postcss_is_recovered(self, project_root: Path) -> None:
        project = make_project(project_root, '[styles]\npostcss = ["sitepipe-no-such-postcss"]\n')
        result = StyleCompiler(project).run()
        assert result.ok is True
        assert [e.code for e in result.recovered] == ["STYLE_PREFIXER_MISSING"]
