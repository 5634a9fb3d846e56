"""structlog configuration for applications embedding polysub."""

import logging

import structlog

from polysub.utils.config import get_settings


def setup_logging(level: str | None = None) -> None:
    """Configure structlog with a console renderer and a level filter.

    The library never calls this itself; applications opt in.

    Args:
        level: Log level name (DEBUG, INFO, ...). Defaults to the
            configured ``log_level`` setting.
    """
    level_name = (level or get_settings().log_level).upper()
    numeric_level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
