"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module attaches a
rich handler to the package logger once.
"""

import logging

from rich.logging import RichHandler

from id_resolver.config import settings

LOGGER_NAME = "id_resolver"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Configure the package logger with a RichHandler.

    Args:
        level: Logging level name or number (default: settings.log_level)

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level or settings.log_level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    return logger
