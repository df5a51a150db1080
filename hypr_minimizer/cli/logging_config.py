"""Logging configuration for the hypr-minimizer CLI.

Two sinks hang off the ``hypr_minimizer`` package logger:

- stderr, silent by default, INFO with ``--verbose``, DEBUG with ``--debug``
- the diagnostics log file, WARNING and above only, so successful
  operations never write to it

The diagnostics file is opened lazily; it only appears once a failure occurs.
"""

import logging
import sys
from typing import Optional
from pathlib import Path

from ..core.errors import MinimizerError


LOGGER_NAME = "hypr_minimizer"

VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DIAGNOSTICS_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DIAGNOSTICS_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Configure logging for the CLI.

    Args:
        verbose: Enable verbose logging (INFO level on stderr)
        debug: Enable debug logging (DEBUG level on stderr)
        log_file: Diagnostics log path (failures only), None to disable

    Returns:
        Configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if debug:
        stderr_level = logging.DEBUG
        log_format = DEBUG_FORMAT
    elif verbose:
        stderr_level = logging.INFO
        log_format = VERBOSE_FORMAT
    else:
        # User-facing messages are printed by the CLI itself
        stderr_level = logging.CRITICAL
        log_format = VERBOSE_FORMAT

    logger.setLevel(min(stderr_level, logging.WARNING))

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(stderr_level)
    if sys.stderr.isatty():
        handler.setFormatter(ColoredFormatter(log_format))
    else:
        handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
        except OSError as e:
            logger.warning(f"Diagnostics log disabled, cannot use {log_file}: {e}")
        else:
            file_handler.setLevel(logging.WARNING)
            file_handler.setFormatter(logging.Formatter(DIAGNOSTICS_FORMAT, DIAGNOSTICS_DATEFMT))
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)


def log_failure(operation: str, error: MinimizerError, logger: Optional[logging.Logger] = None) -> None:
    """Write a diagnostics entry for a failed operation.

    Benign outcomes that are not marked loggable are skipped, so a
    keybinding fired without a target leaves no trace.
    """
    if not error.loggable:
        return
    if logger is None:
        logger = get_logger()
    level = logging.WARNING if error.benign else logging.ERROR
    logger.log(level, f"{operation}: {error.diagnostic()}")
