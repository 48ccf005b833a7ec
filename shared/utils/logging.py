"""
Structured logging setup for the aggregation tooling.

Provides consistent logging configuration with structured output
and per-series context binding.
"""

import logging
import sys
from typing import Optional, TextIO
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    service_name: str,
    log_level: str = "info",
    format_type: str = "json",
    stream: Optional[TextIO] = None
) -> None:
    """
    Setup structured logging for the service.

    Args:
        service_name: Name of the service
        log_level: Logging level (debug, info, warning, error)
        format_type: Output format (json, console)
        stream: Stream for log output, stdout when not given
    """
    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, log_level.upper())
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def add_series_id(logger: structlog.BoundLogger, series_id: str) -> structlog.BoundLogger:
    """Add series ID to logger context."""
    return logger.bind(series_id=series_id)
