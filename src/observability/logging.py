"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> None:
    """Configure structured logging for the feed service.

    Sets up structlog with timestamps, log levels and context variables
    bound per request.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: the current stderr).
        json_format: Whether to render JSON lines (default: True).
    """
    stream = output or sys.stderr
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        # Streams may be swapped between CLI invocations
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=level,
    )


def bind_request_context(request_id: str) -> None:
    """Bind the feed request id to all subsequent log messages.

    Args:
        request_id: Unique request identifier.
    """
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    """Clear request context from log messages."""
    structlog.contextvars.unbind_contextvars("request_id")
