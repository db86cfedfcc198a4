"""structlog setup for diagnostics.

Logs go to stderr; stdout belongs to the conversation.
"""
from __future__ import annotations
import logging
import os
import sys

import structlog

_NOISY_LIBRARIES = ("httpx", "httpcore", "openai")


def _supports_colour() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return sys.stderr.isatty()


def init_logger(level: str = "WARNING") -> None:
    """Configure structlog on top of the stdlib root logger."""
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric, force=True)

    # Library chatter stays quiet unless we're debugging.
    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(numeric if numeric <= logging.DEBUG else logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=_supports_colour()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
