"""Filesystem operations for the source and output trees.

INVARIANT: The output tree is derived. Stages only ever write below the
configured output directories, and no stage reads a file written by a
later stage.
"""

from __future__ import annotations

from pathlib import Path

# Compiled artifacts owned by the pipeline, removed by ``sitepipe clean``.
DERIVED_SUFFIXES = (".css", ".js", ".map")


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_style_sources(styles_dir: Path) -> list[Path]:
    """Top-level ``*.scss`` entry points, skipping ``_partial.scss`` files."""
    if not styles_dir.is_dir():
        return []
    return sorted(p for p in styles_dir.glob("*.scss") if not p.name.startswith("_"))


def find_all_style_sources(styles_dir: Path) -> list[Path]:
    """Every ``*.scss`` file below *styles_dir*, partials included."""
    if not styles_dir.is_dir():
        return []
    return sorted(p for p in styles_dir.rglob("*.scss") if p.is_file())


def find_scripts(scripts_dir: Path) -> list[Path]:
    """Top-level ``*.js`` files (no recursion into vendor subfolders)."""
    if not scripts_dir.is_dir():
        return []
    return sorted(p for p in scripts_dir.glob("*.js") if p.is_file())


def find_vendor_styles(vendor_dir: Path) -> list[Path]:
    """Every file below *vendor_dir*, in sorted path order."""
    if not vendor_dir.is_dir():
        return []
    return sorted(p for p in vendor_dir.rglob("*") if p.is_file())


def find_markup(output_root: Path) -> list[Path]:
    """``*.html`` files directly in the output root."""
    if not output_root.is_dir():
        return []
    return sorted(p for p in output_root.glob("*.html") if p.is_file())


def remove_derived(directories: list[Path]) -> list[Path]:
    """Delete compiled artifacts (css, js, maps) directly in *directories*.

    Subdirectories such as copied vendor libraries are left alone.
    Returns the removed paths.
    """
    removed: list[Path] = []
    for directory in directories:
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix in DERIVED_SUFFIXES:
                path.unlink()
                removed.append(path)
    return removed
