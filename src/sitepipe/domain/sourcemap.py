"""Source map v3 generation for line-per-source bundles.

The style bundle is written with one minified input per line, so a map
only needs one segment per generated line: column 0 of line *i* comes from
line 0, column 0 of source *i*.
"""

from __future__ import annotations

from typing import Any

_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def encode_vlq(value: int) -> str:
    """Base64 VLQ-encode one signed integer."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    digits: list[str] = []
    while True:
        digit = vlq & 0b11111
        vlq >>= 5
        if vlq:
            digit |= 0b100000
        digits.append(_BASE64[digit])
        if not vlq:
            return "".join(digits)


def line_per_source_map(file: str, sources: list[str]) -> dict[str, Any]:
    """Build a map where generated line *i* maps to the start of ``sources[i]``."""
    segments: list[str] = []
    previous = 0
    for index in range(len(sources)):
        # [generated column, source index delta, source line delta, source column delta]
        segments.append(
            encode_vlq(0) + encode_vlq(index - previous) + encode_vlq(0) + encode_vlq(0)
        )
        previous = index
    return {
        "version": 3,
        "file": file,
        "sources": sources,
        "names": [],
        "mappings": ";".join(segments),
    }
