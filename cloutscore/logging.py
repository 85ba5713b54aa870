"""Structured logging configuration for CloutScore.

Two renderers are supported:
- JSON lines for the Azure Functions host and any other service deployment
- a console renderer for local runs

Core modules never configure logging themselves; they call ``get_logger``
and the entrypoint decides how records are rendered.
"""

import logging

import structlog
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)


def configure_logging(cli_mode: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog for the current process.

    Args:
        cli_mode: Render human-readable console output instead of JSON.
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        format_exc_info,
    ]

    if cli_mode:
        from structlog.dev import ConsoleRenderer
        processors.append(ConsoleRenderer(colors=True))
    else:
        processors.append(JSONRenderer())

    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Return a structlog logger, named after the calling module when given."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
