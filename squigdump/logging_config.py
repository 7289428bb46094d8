"""
Centralized logging configuration for squigdump

This module provides a centralized logging configuration that can be used
across all modules. The logging level can be controlled via the
SQUIGDUMP_LOG_LEVEL environment variable, or raised from the command line
with -v/--verbose.

Environment Variables:
    SQUIGDUMP_LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                         Default: WARNING

Examples:
    >>> from squigdump.logging_config import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing read...")
    >>> logger.error("File not found: %s", path)
"""

import logging
import os

from .constants import APP_NAME, DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV_VAR


def _configure_package_logger() -> logging.Logger:
    """Attach the console handler to the package logger (once)"""
    logger = logging.getLogger(APP_NAME)

    # Only configure if logger hasn't been configured yet
    # This prevents duplicate handlers when get_logger is called multiple times
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        # Set level from environment variable (default: WARNING)
        level_name = os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
        level = getattr(logging, level_name, None)
        if isinstance(level, int):
            logger.setLevel(level)
        else:
            logger.setLevel(logging.WARNING)
            logger.warning(
                f"Invalid {LOG_LEVEL_ENV_VAR} '{level_name}'. Using WARNING instead. "
                f"Valid levels: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the specified name

    Module loggers (``squigdump.*``) carry no handler of their own; their
    records propagate to the package logger, which owns the console handler
    and the level.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured logger instance
    """
    package_logger = _configure_package_logger()
    if name == APP_NAME:
        return package_logger
    return logging.getLogger(name)


def set_log_level(verbosity: int) -> None:
    """Raise the package log level from a -v count (1 = INFO, 2+ = DEBUG)

    A verbosity of 0 leaves the environment-derived level untouched.
    """
    if verbosity <= 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    _configure_package_logger().setLevel(level)
