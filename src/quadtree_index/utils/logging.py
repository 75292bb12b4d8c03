"""
Logging setup

structlog configuration for the quadkey service, plus the debug trace hook
that reports projection steps when tracing is switched on.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from ..indexing.projection import TraceHook


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name
        json_format: Render JSON lines; otherwise a human-readable console format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def structlog_trace_hook(logger: Optional[Any] = None) -> TraceHook:
    """
    Build a projection trace hook that logs every step at DEBUG level.

    Args:
        logger: structlog logger to use; defaults to one bound to ``component="projection"``
    """
    if logger is None:
        logger = structlog.get_logger(component="projection")

    def hook(event: str, **values: Any) -> None:
        logger.debug(event, **values)

    return hook
