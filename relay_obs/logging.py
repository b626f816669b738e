"""
Structured Logging (structlog).

JSON output by default, console output for local development.
"""

import logging
import sys
from typing import TextIO

import structlog

from relay_config.settings import Settings


def setup_logging(settings: Settings, stream: TextIO | None = None) -> None:
    """
    Configure structlog for structured logging.

    Output format: JSON (default) or text (dev)
    Stream: stdout unless given; the gateway CLI passes stderr so that
    stdout only carries tool output.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=settings.LOG_LEVEL.upper(),
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get configured logger."""
    return structlog.get_logger(name)
