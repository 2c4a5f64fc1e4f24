"""structlog setup for JAMB Estimate."""

import logging

import structlog

from jamb_estimate.config.settings import settings


def configure_logging(log_level: str = None) -> None:
    """Configure structlog with a console renderer.

    Called once by the embedding application at startup; library modules
    never configure logging themselves.

    Args:
        log_level: Level name (DEBUG, INFO, ...). Defaults to settings.log_level.
    """
    level_name = (log_level or settings.log_level or "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
