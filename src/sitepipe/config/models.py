"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, sitepipe.toml only contains overrides.
A project laid out like ``src/assets`` -> ``dist/assets`` needs no config file.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- sitepipe.toml sections ---


class PathsConfig(BaseModel):
    """[paths] section. All paths are relative to the project root."""

    model_config = {"frozen": True}

    styles_dir: str = "src/assets/scss"
    scripts_dir: str = "src/assets/js"
    script_entry: str = "src/assets/js/app.js"
    vendor_styles_dir: str = "src/assets/vendor/css"
    output_root: str = "dist"
    output_styles_dir: str = "dist/assets/css"
    output_scripts_dir: str = "dist/assets/js"


class StylesConfig(BaseModel):
    """[styles] section."""

    model_config = {"frozen": True}

    output_style: str = "expanded"
    include_paths: list[str] = Field(default_factory=list)
    autoprefix: bool = True
    postcss: list[str] = Field(default_factory=lambda: ["npx", "--no-install", "postcss"])
    browsers: str = "last 2 versions"
    app_stylesheet: str = "main.css"
    bundle_name: str = "main.min.css"


class ScriptsConfig(BaseModel):
    """[scripts] section."""

    model_config = {"frozen": True}

    babel: list[str] = Field(default_factory=lambda: ["npx", "--no-install", "babel"])
    presets: list[str] = Field(default_factory=lambda: ["@babel/preset-env"])
    remove_flags: dict[str, bool] = Field(default_factory=lambda: {"production": True})
    terser: list[str] = Field(default_factory=lambda: ["npx", "--no-install", "terser"])


class LintConfig(BaseModel):
    """[lint] section."""

    model_config = {"frozen": True}

    style_config: str = ".scss-lint.yml"
    script_config: str = ".jshintrc"
    sass_lint: list[str] = Field(default_factory=lambda: ["npx", "--no-install", "sass-lint"])
    jshint: list[str] = Field(default_factory=lambda: ["npx", "--no-install", "jshint"])


class ServerConfig(BaseModel):
    """[server] section."""

    model_config = {"frozen": True}

    host: str = "localhost"
    port: int = 3000
    open_browser: bool = True
    live_css: bool = True


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True}

    preview: bool = True
    strict: bool = False
    max_workers: int = 4


class ReplaceConfig(BaseModel):
    """[replace] section: what the markup placeholder blocks become."""

    model_config = {"frozen": True}

    js: list[str] = Field(
        default_factory=lambda: [
            "assets/js/vendors/jquery.min.js",
            "assets/js/vendors/popper.min.js",
            "assets/js/vendors/bootstrap.min.js",
            "assets/js/vendors/easing.min.js",
            "assets/js/vendors/swiper.min.js",
            "assets/js/vendors/massonry.min.js",
            "assets/js/vendor/bootstrap-slider.js",
            "assets/js/vendor/magnific-popup.js",
            "assets/js/vendor/waypoints.js",
            "assets/js/vendor/counterup.js",
            "assets/js/vendor/isotop.pkgd.min.js",
            "assets/js/app.min.js",
        ]
    )
    css: list[str] = Field(default_factory=lambda: ["assets/css/main.min.css"])
    keep_unassigned: bool = False

