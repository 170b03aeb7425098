"""ReferenceRewriter: point output markup at the minified artifacts.

If a prior run already replaced the placeholder blocks, the markers are
gone and the file is left untouched. Restore the markers in the markup
before building again to pick up a changed reference list.
"""

from __future__ import annotations

import structlog

from sitepipe.domain.markup import replace_blocks
from sitepipe.infrastructure.filesystem import find_markup, read_text, write_text
from sitepipe.services.base import BaseStage
from sitepipe.services.result import StageResult
from sitepipe.services.telemetry import traced

log = structlog.get_logger(__name__)


class ReferenceRewriter(BaseStage):
    """Replace ``build:js`` / ``build:css`` blocks in every output ``*.html``."""

    name = "rewrite_markup"

    @traced
    def run(self) -> StageResult:
        self._announce()
        replace = self._project.settings.replace
        replacements = {"js": replace.js, "css": replace.css}
        rewritten: list[str] = []
        unchanged: list[str] = []

        for path in find_markup(self._project.output_root):
            html, blocks = replace_blocks(
                read_text(path),
                replacements,
                keep_unassigned=replace.keep_unassigned,
            )
            if not blocks:
                log.info("markup.no_placeholders", path=self._rel(path))
                unchanged.append(self._rel(path))
                continue
            write_text(path, html)
            log.debug("markup.rewritten", path=self._rel(path), blocks=blocks)
            rewritten.append(self._rel(path))

        return StageResult(
            ok=True,
            op=self.name,
            data={"outputs": rewritten, "unchanged": unchanged},
        )
