"""structlog setup shared by every command.

One stderr handler on the root logger formats both structlog events and
plain stdlib records (httpx logs through stdlib), so ``--log-json``
yields a single JSON-lines stream.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

# Logger name -> (level with --verbose, level without).
_LEVELS: dict[str, tuple[int, int]] = {
    "freelancedesk": (logging.DEBUG, logging.WARNING),
    "httpx": (logging.INFO, logging.WARNING),
    "httpcore": (logging.INFO, logging.WARNING),
}


def _pre_chain() -> list[Processor]:
    """Processors every event passes through before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        verbose: Open ``freelancedesk`` loggers to DEBUG and httpx to INFO.
        log_json: Render JSON lines instead of the console format.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers = [_stderr_handler(log_json=log_json)]
    root.setLevel(logging.WARNING)

    for name, (loud, quiet) in _LEVELS.items():
        logging.getLogger(name).setLevel(loud if verbose else quiet)
