"""Structured logging configuration using structlog."""

import logging
import sys

import structlog
from structlog.typing import Processor

# Loggers of third-party libraries that log every request at INFO.
_CHATTY_LOGGERS = ("opensearch", "urllib3")


def configure_logging(debug: bool = False, json_logs: bool = True) -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        debug: Enable debug-level logging, including the search client's
            per-request transport logs.
        json_logs: Render JSON lines. When False a coloured console
            renderer is used, which is easier to read during development.
    """
    level = logging.DEBUG if debug else logging.INFO
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(levelname)s %(name)s %(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
    # RequestLoggingMiddleware already emits one event per request.
    logging.getLogger("uvicorn.access").disabled = True

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)
