"""Placeholder block replacement in markup files.

A placeholder block looks like::

    <!-- build:js -->
    <script src="assets/js/a.js"></script>
    <script src="assets/js/b.js"></script>
    <!-- endbuild -->

The whole block, markers included, is replaced by one tag per path assigned
to its name, indented like the opening marker. Once replaced, the markers
are gone, so running the replacement again finds nothing to do.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

_BLOCK = re.compile(
    r"(?P<lead>\n?)(?P<indent>[ \t]*)<!--\s*build:(?P<name>[\w-]+)\s*-->"
    r".*?"
    r"<!--\s*endbuild\s*-->(?P<tail>\n?)",
    re.DOTALL | re.IGNORECASE,
)

SCRIPT_TAG = '<script src="{}"></script>'
STYLE_TAG = '<link rel="stylesheet" href="{}">'


def render_tag(path: str) -> str:
    """Render the reference tag for *path*, chosen by file extension."""
    if path.lower().endswith(".css"):
        return STYLE_TAG.format(path)
    return SCRIPT_TAG.format(path)


def replace_blocks(
    html: str,
    replacements: Mapping[str, Sequence[str]],
    *,
    keep_unassigned: bool = False,
) -> tuple[str, list[str]]:
    """Replace placeholder blocks in *html*.

    Args:
        html: Markup to rewrite.
        replacements: Block name -> ordered list of paths to reference.
        keep_unassigned: Leave blocks whose name has no replacement as they
            are. When False they are removed.

    Returns:
        ``(new_html, names)`` where *names* lists the blocks that were
        rewritten or removed. It is empty when the markup carries no markers.
    """
    replaced: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        name = match.group("name")
        lead, indent, tail = match.group("lead", "indent", "tail")
        if name not in replacements:
            if keep_unassigned:
                return match.group(0)
            replaced.append(name)
            return lead
        replaced.append(name)
        tags = [indent + render_tag(path) for path in replacements[name]]
        return lead + "\n".join(tags) + tail

    return _BLOCK.sub(_replace, html), replaced
