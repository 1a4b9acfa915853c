"""Logging setup utilities for hellosvc.

Configures logging for the package and for the embedded uvicorn server
based on the logging configuration settings.
"""

from __future__ import annotations

import logging
import sys

from hellosvc.config.settings import LoggingConfig

LOGGER_NAMES = ("hellosvc", "uvicorn")


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the hellosvc application.

    Sets up the package logger and the uvicorn logger with the specified
    level, format, and optional file handler. Calling it again replaces
    the handlers installed by the previous call.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = logging.Formatter(config.format)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger("hellosvc").info("Logging initialized at %s level", config.level)
