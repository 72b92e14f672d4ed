"""Library-friendly logging helpers.

The package logger gets a `NullHandler` so importing j-notice never emits
"No handler found" warnings. The CLI calls `configure_logging(...)` to attach
a `RichHandler` that shares the CLI's console.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER_NAME = "j_notice"

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger. If `name` is None, return the package logger."""
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def configure_logging(level: int | str = logging.INFO, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Calling it again only adjusts the level of the existing handler.

    Args:
        level: A logging level or level name (e.g. "DEBUG").
        console: Console to log to; defaults to a stderr console.

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)
            return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger
