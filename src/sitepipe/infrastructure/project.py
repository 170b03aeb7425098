"""Project: resolved source and output locations for one pipeline run.

Every configured path is relative to ``settings.project_root``. The
project object is created once per CLI invocation and shared by all
stages, including stages running on worker threads; it holds no mutable
state after construction.
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitepipe.config.settings import SitepipeSettings


class Project:
    """Path resolution over :class:`SitepipeSettings`."""

    def __init__(self, settings: SitepipeSettings) -> None:
        self.settings = settings
        self.root = settings.project_root.resolve()

    def _resolve(self, relative: str) -> Path:
        return self.root / relative

    # --- Source tree ---

    @cached_property
    def styles_dir(self) -> Path:
        return self._resolve(self.settings.paths.styles_dir)

    @cached_property
    def scripts_dir(self) -> Path:
        return self._resolve(self.settings.paths.scripts_dir)

    @cached_property
    def script_entry(self) -> Path:
        return self._resolve(self.settings.paths.script_entry)

    @cached_property
    def vendor_styles_dir(self) -> Path:
        return self._resolve(self.settings.paths.vendor_styles_dir)

    @cached_property
    def style_lint_config(self) -> Path:
        return self._resolve(self.settings.lint.style_config)

    @cached_property
    def script_lint_config(self) -> Path:
        return self._resolve(self.settings.lint.script_config)

    @property
    def include_paths(self) -> list[str]:
        return [str(self._resolve(p)) for p in self.settings.styles.include_paths]

    # --- Output tree ---

    @cached_property
    def output_root(self) -> Path:
        return self._resolve(self.settings.paths.output_root)

    @cached_property
    def output_styles_dir(self) -> Path:
        return self._resolve(self.settings.paths.output_styles_dir)

    @cached_property
    def output_scripts_dir(self) -> Path:
        return self._resolve(self.settings.paths.output_scripts_dir)

    @property
    def compiled_script(self) -> Path:
        """Where the transpiler writes (and the script minifier reads)."""
        return self.output_scripts_dir / self.script_entry.name

    @property
    def minified_script(self) -> Path:
        return self.output_scripts_dir / f"{self.script_entry.stem}.min.js"

    @property
    def app_stylesheet(self) -> Path:
        """The compiled application stylesheet the style minifier appends last."""
        return self.output_styles_dir / self.settings.styles.app_stylesheet

    @property
    def style_bundle(self) -> Path:
        return self.output_styles_dir / self.settings.styles.bundle_name

    def relative(self, path: Path) -> str:
        """Render *path* relative to the project root for logs and results."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return str(path)
