"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from id_resolver.log import LOGGER_NAME, configure_logging


def test_configure_logging_once():
    """Test that repeated configuration attaches a single rich handler."""
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    try:
        configure_logging("DEBUG")
        configure_logging("WARNING")

        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.WARNING
    finally:
        logger.handlers = saved_handlers
        logger.setLevel(saved_level)
