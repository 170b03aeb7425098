"""Conditional code removal for production builds.

Blocks are delimited by ``removeIf(flag)`` / ``endRemoveIf(flag)`` markers in
any comment style the source may carry::

    //removeIf(production)
    console.log("debug only");
    //endRemoveIf(production)

    /* removeIf(production) */ mock(); /* endRemoveIf(production) */

    <!-- removeIf(!production) --> ... <!-- endRemoveIf(!production) -->

A block is removed, markers included, when its condition is true for the
given flags. ``!flag`` negates. Unknown flags are false.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

_OPEN = r"(?://|/\*|<!--)[ \t]*"
_CLOSE = r"[ \t]*(?:\*/|-->)?"

_BLOCK = re.compile(
    r"[ \t]*" + _OPEN + r"removeIf\((?P<cond>!?[\w-]+)\)" + _CLOSE
    + r"(?P<body>.*?)"
    + _OPEN + r"endRemoveIf\((?P=cond)\)" + _CLOSE + r"[ \t]*\n?",
    re.DOTALL,
)


def evaluate(condition: str, flags: Mapping[str, bool]) -> bool:
    """Evaluate ``flag`` or ``!flag`` against *flags*."""
    if condition.startswith("!"):
        return not flags.get(condition[1:], False)
    return bool(flags.get(condition, False))


def remove_code(source: str, flags: Mapping[str, bool]) -> str:
    """Strip every marked block whose condition holds for *flags*."""

    def _replace(match: re.Match[str]) -> str:
        if evaluate(match.group("cond"), flags):
            return ""
        return match.group(0)

    return _BLOCK.sub(_replace, source)
