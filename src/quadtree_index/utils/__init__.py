"""
Shared utilities: configuration and logging setup.
"""

from .config import Config
from .logging import configure_logging, structlog_trace_hook

__all__ = [
    "Config",
    "configure_logging",
    "structlog_trace_hook",
]
