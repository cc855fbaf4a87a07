"""
Structured logging configuration for sitemap generation.
Provides console or JSON-structured logging with generation ID support.
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.typing import FilteringBoundLogger

from .config import Settings, get_settings


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging for the application."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper())

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "console":
        # Human-readable console output for development
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        # JSON output for production
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = None) -> FilteringBoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# Generation ID context management
def bind_generation_id(generation_id: str) -> None:
    """Bind generation ID to the logging context."""
    structlog.contextvars.bind_contextvars(generation_id=generation_id)


def clear_generation_id() -> None:
    """Clear generation ID from logging context."""
    structlog.contextvars.unbind_contextvars("generation_id")


def log_error_with_context(
    logger: FilteringBoundLogger,
    error: Exception,
    context: Dict[str, Any],
    event: str = "Error occurred",
) -> None:
    """Log an error with additional context."""
    logger.error(
        event,
        error=str(error),
        error_type=type(error).__name__,
        **context,
        exc_info=True
    )
