"""Logging setup for the command-line tool."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "carnes"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Route the package loggers to stderr through rich.

    Safe to call more than once: the handler is installed only once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(getattr(h, "_carnes_handler", False) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._carnes_handler = True
        logger.addHandler(handler)

    return logger
