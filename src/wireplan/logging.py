"""
Structured logging for wireplan.

Usage:
    from wireplan.logging import configure_logging, get_logger

    configure_logging(AnalysisSettings(log_level="DEBUG"))

    logger = get_logger(__name__)
    logger.debug("merge.completed", component="app.UserService", entries=3)
"""

import logging
import sys
from typing import List, Optional

import structlog

from wireplan.config import AnalysisSettings, get_settings

_configured: bool = False


def configure_logging(settings: Optional[AnalysisSettings] = None, force: bool = False) -> None:
    """Configure structlog on top of the standard library logging module.

    Args:
        settings: Settings providing level and format. Uses cached settings if not provided.
        force: Reconfigure even if logging was already configured.
    """
    global _configured

    if _configured and not force:
        return

    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.WARNING)

    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str) -> structlog.types.FilteringBoundLogger:
    """Get a structured logger bound to ``name``.

    Args:
        name: Logger name, usually ``__name__``.
    """
    return structlog.get_logger(name)
