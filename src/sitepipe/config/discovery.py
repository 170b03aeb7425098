"""Locate ``sitepipe.toml`` for a site.

An explicit ``SITEPIPE_CONFIG`` path wins. Otherwise the directory the
command runs in and each of its ancestors is searched, nearest first, so
commands work from anywhere inside the site (``src/assets/scss`` included).
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "sitepipe.toml"
CONFIG_ENV_VAR = "SITEPIPE_CONFIG"


def _candidates(start: Path) -> list[Path]:
    directory = start.resolve()
    return [d / CONFIG_FILENAME for d in (directory, *directory.parents)]


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    A ``SITEPIPE_CONFIG`` pointing at a missing file disables discovery
    rather than falling back to the walk-up.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None
    return next((p for p in _candidates(start or Path.cwd()) if p.is_file()), None)
