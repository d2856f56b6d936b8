"""
Structured logging for hermesprobe.

structlog events are handed to the standard library and rendered by a
RichHandler on stderr. stdout carries only command results.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config

_HANDLER_NAME = "hermesprobe-rich"


def _stderr_handler(debug: bool) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    handler.set_name(_HANDLER_NAME)
    return handler


def _renderer() -> structlog.types.Processor:
    if sys.stderr.isatty():
        return structlog.dev.ConsoleRenderer(colors=True)
    return structlog.processors.JSONRenderer()


def setup_logging(config: Config | None = None) -> None:
    """Configure logging for the current process.

    Safe to call more than once: the stderr handler is installed a single
    time and later calls only adjust the level.

    Args:
        config: Source of ``log_level``. Defaults to WARNING when omitted.
    """
    log_level = config.log_level if config else "WARNING"
    level = logging.getLevelName(log_level)
    if not isinstance(level, int):
        level = logging.WARNING

    package_logger = logging.getLogger("hermesprobe")
    package_logger.setLevel(level)
    if not any(h.get_name() == _HANDLER_NAME for h in package_logger.handlers):
        package_logger.addHandler(_stderr_handler(debug=level <= logging.DEBUG))
        package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger; pass ``__name__`` so it lands under ``hermesprobe``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Attach key-value pairs to every event logged from this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
