"""Logger helpers shared by the engine and the CLI."""

import logging
from typing import Optional

from filter_builder.config import settings

ROOT_LOGGER = "filter_builder"


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. ``filter_builder.mutations``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a stream handler to the package logger.

    Library code never calls this; the CLI does once at startup.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if level is not None:
        logger.setLevel(level.upper())
    else:
        logger.setLevel(settings.log_level_value)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        logger.addHandler(handler)
