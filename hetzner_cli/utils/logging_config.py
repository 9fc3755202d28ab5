"""
Logging configuration using structlog.

Command output goes to stdout, so log records are rendered for humans on
stderr. The default level is WARNING; ``--log-level DEBUG`` shows which
backend every secret was resolved from. Secrets themselves are never
logged, only sources, keychain accounts and context names.
"""

import sys
from typing import Any

import structlog


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Looked up per logger so a replaced sys.stderr is honoured
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(log_level: str = "WARNING") -> None:
    """Configure structured logging on stderr.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level.upper()),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

