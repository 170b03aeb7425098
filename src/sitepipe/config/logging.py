"""structlog setup shared by every sitepipe command.

Log lines go to stderr, either rendered for a terminal or as JSON lines
(``--log-json``). stdout stays reserved for the command result.

Stage progress is logged at INFO, so the ``sitepipe`` logger defaults to
INFO. Parallel stages log from worker threads; each line carries the
thread name so interleaved output can be told apart.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

# tornado logs every request at INFO, livereload every poll hit.
_CHATTY_LOGGERS = ("tornado", "livereload")


def _pipeline_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def _renderer(*, log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Args:
        verbose: DEBUG for sitepipe loggers (watch events, spans).
        quiet: WARNING and up only; stage errors are still shown.
        log_json: One JSON object per line instead of console rendering.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        CallsiteParameterAdder([CallsiteParameter.THREAD_NAME]),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_renderer(log_json=log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("sitepipe").setLevel(_pipeline_level(verbose=verbose, quiet=quiet))
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
