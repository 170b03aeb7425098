"""SitepipeSettings: the merged configuration for one CLI invocation.

Sources, strongest first:

=============  ==============================================
CLI flags      ``--json``, ``-q``, ``-v``, ``--log-json``
environment    ``SITEPIPE_<SECTION>__<KEY>``, e.g.
               ``SITEPIPE_SERVER__PORT=8080``
sitepipe.toml  sparse overrides, found by :func:`find_config`
models         defaults in :mod:`sitepipe.config.models`
=============  ==============================================

The directory holding ``sitepipe.toml`` is the project root that every
configured path is relative to.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from sitepipe.config.discovery import find_config
from sitepipe.config.models import (
    BuildConfig,
    LintConfig,
    PathsConfig,
    ReplaceConfig,
    ScriptsConfig,
    ServerConfig,
    StylesConfig,
)

SECTIONS = ("paths", "styles", "scripts", "lint", "server", "build", "replace")

# The TOML file for the settings object under construction.
_loading: ContextVar[Path | None] = ContextVar("_loading", default=None)


def load_toml(path: Path) -> dict[str, Any]:
    """Parse *path* and check it only holds known sections.

    Raises:
        click.ClickException: on a syntax error or an unknown section.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
    unknown = sorted(set(data) - set(SECTIONS))
    if unknown:
        msg = f"Unknown section(s) in {path}: {', '.join(unknown)}"
        raise click.ClickException(msg)
    return data


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one ``sitepipe.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = load_toml(path) if path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class SitepipeSettings(BaseSettings):
    """Frozen settings shared by every stage of a run.

    Attributes:
        project_root: Base for all configured paths.
        config_path: The ``sitepipe.toml`` that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SITEPIPE_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    paths: PathsConfig = Field(default_factory=PathsConfig)
    styles: StylesConfig = Field(default_factory=StylesConfig)
    scripts: ScriptsConfig = Field(default_factory=ScriptsConfig)
    lint: LintConfig = Field(default_factory=LintConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    replace: ReplaceConfig = Field(default_factory=ReplaceConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _loading.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **flags: Any,
    ) -> SitepipeSettings:
        """Build settings for a command run.

        *config_path* (``--config``) must exist; without it the config is
        discovered from *project_root* or the working directory. The project
        root defaults to the config file's directory.

        Raises:
            click.ClickException: if the config file is missing or invalid.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _loading.set(toml_path)
        try:
            return cls(project_root=project_root, config_path=toml_path, **flags)
        finally:
            _loading.reset(token)
