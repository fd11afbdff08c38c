"""Logging configuration for Moot Court.

Log records go to stderr through Rich so they never interleave with the
transcript and prompts the CLI writes to stdout. A log file, when set,
receives every record of the ``moot_court`` logger tree.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


PACKAGE_LOGGER = "moot_court"

# Libraries that log every HTTP request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(message)s"

console = Console(stderr=True)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    rich_output: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file receiving all records, DEBUG included
        rich_output: Use Rich for console output instead of plain text

    Returns:
        The ``moot_court`` logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if log_file else log_level)
    logger.handlers.clear()

    if rich_output:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    if log_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the package tree (e.g. ``moot_court.session.driver``)."""
    return logging.getLogger(name)
