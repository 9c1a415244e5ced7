"""
Structured logging setup using structlog.

Provides consistent console logging with recipe context binding.
"""

import sys
import logging
import structlog
from typing import Any, Optional

from .settings import settings


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level override (defaults to MLRECIPES_LOG_LEVEL)
    """
    log_level = (level or settings.mlrecipes_log_level).upper()

    processors = [
        structlog.contextvars.merge_contextvars,  # Merge context variables (recipe, etc.)
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level),
        force=True,
    )


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """
    Bind additional context variables to logging.

    Args:
        **kwargs: Context variables to bind (e.g., recipe, dataset)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables from logging."""
    structlog.contextvars.clear_contextvars()
