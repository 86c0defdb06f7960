"""
Error Handling & Logging Infrastructure

Logging setup for the ``timecapsule`` logger tree and the decorator the CLI
uses to turn errors into a single user-facing message.
"""

import logging
import sys
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Callable

from .errors import TimeCapsuleError

LOGGER_NAME = "timecapsule"

_logger = None


def setup_logging(log_dir: Path, log_level: str = "INFO", verbose: bool = False) -> logging.Logger:
    """
    Set up structured logging for the application.

    Args:
        log_dir: Directory for log files
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        verbose: Also log to stderr (otherwise only the log file is written)

    Returns:
        Configured logger instance
    """
    global _logger

    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    log_file = log_dir / f"timecapsule_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    if verbose:
        logger.addHandler(console_handler)

    _logger = logger
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the package logger, or a child of it (``get_logger(__name__)``)."""
    if name and name != LOGGER_NAME:
        if not name.startswith(LOGGER_NAME + "."):
            name = f"{LOGGER_NAME}.{name}"
        return logging.getLogger(name)
    global _logger
    if _logger is None:
        _logger = logging.getLogger(LOGGER_NAME)
    return _logger


def report_errors(func: Callable[..., int]) -> Callable[..., int]:
    """
    Decorator for CLI commands.

    A ``TimeCapsuleError`` is logged with its traceback and its
    ``user_message`` printed to stderr; the command then returns exit code 1.
    Anything else propagates.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TimeCapsuleError as e:
            get_logger().error(f"Error in {func.__name__}: {e}", exc_info=True)
            print(f"❌ {e.user_message}", file=sys.stderr)
            return 1
    return wrapper
