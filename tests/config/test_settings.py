"""Tests for SitepipeSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from sitepipe.config.settings import SitepipeSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SITEPIPE_CONFIG", "SITEPIPE_SERVER__PORT", "SITEPIPE_BUILD__PREVIEW"):
        monkeypatch.delenv(name, raising=False)


class TestSitepipeSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = SitepipeSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.paths.styles_dir == "src/assets/scss"
        assert settings.paths.output_root == "dist"
        assert settings.server.port == 3000
        assert settings.build.preview is True
        assert settings.replace.css == ["assets/css/main.min.css"]
        assert settings.replace.js[-1] == "assets/js/app.min.js"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = SitepipeSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "sitepipe.toml").write_text(
            '[paths]\nstyles_dir = "styles"\n[server]\nport = 8080\n'
        )
        settings = SitepipeSettings.from_cli(project_root=tmp_path)
        assert settings.paths.styles_dir == "styles"
        assert settings.server.port == 8080
        assert settings.server.host == "localhost"  # default preserved

    def test_sparse_override(self, tmp_path: Path) -> None:
        """Only overridden fields change, the rest keep defaults."""
        (tmp_path / "sitepipe.toml").write_text("[build]\npreview = false\n")
        settings = SitepipeSettings.from_cli(project_root=tmp_path)
        assert settings.build.preview is False
        assert settings.build.max_workers == 4

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "sitepipe.toml").write_text("")
        settings = SitepipeSettings.from_cli(project_root=tmp_path)
        assert settings.styles.output_style == "expanded"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "site.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[replace]\ncss = ["css/site.css"]\n')
        settings = SitepipeSettings.from_cli(config_path=str(custom))
        assert settings.replace.css == ["css/site.css"]
        assert settings.config_path == custom
        assert settings.project_root == custom.parent

    def test_project_root_is_config_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "sitepipe.toml").write_text("")
        nested = tmp_path / "src" / "assets"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = SitepipeSettings.from_cli()
        assert settings.config_path is not None
        assert settings.config_path.resolve() == (tmp_path / "sitepipe.toml").resolve()
        assert settings.project_root.resolve() == tmp_path.resolve()

    def test_invalid_toml_raises_click_exception(self, tmp_path: Path) -> None:
        (tmp_path / "sitepipe.toml").write_text("[paths\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            SitepipeSettings.from_cli(project_root=tmp_path)


class TestEnvAndCliFlags:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "sitepipe.toml").write_text("[server]\nport = 8080\n")
        monkeypatch.setenv("SITEPIPE_SERVER__PORT", "9000")
        settings = SitepipeSettings.from_cli(project_root=tmp_path)
        assert settings.server.port == 9000

    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = SitepipeSettings.from_cli(
            project_root=tmp_path,
            json_output=True,
            quiet=True,
            verbose=True,
            log_json=True,
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True
        assert settings.log_json is True


class TestConfigErrors:
    def test_unknown_section_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "sitepipe.toml").write_text("[style]\nautoprefix = false\n")
        with pytest.raises(click.ClickException, match="Unknown section"):
            SitepipeSettings.from_cli(project_root=tmp_path)

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            SitepipeSettings.from_cli(config_path=str(tmp_path / "nope.toml"))
