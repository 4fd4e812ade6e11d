"""
Logging helpers for profile_keeper.

Modules get their logger with get_logger(__name__). The CLI calls
setup_logging() once; library use leaves handler configuration to the caller.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "profile_keeper"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger with the given name, or the package logger if None."""
    return logging.getLogger(name or ROOT_LOGGER_NAME)


def _coerce_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(
    level: Union[str, int] = "WARNING",
    log_file: Optional[str] = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure the profile_keeper logger.

    Console output goes through rich on stderr so it never mixes with
    payloads printed on stdout. An optional rotating file receives
    everything from DEBUG up.

    Args:
        level: Console level name or number
        log_file: Optional path of a rotating log file
        max_bytes: Rotation size for the log file
        backup_count: Number of rotated files to keep

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    console_handler.setLevel(_coerce_level(level))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        path = os.path.expanduser(log_file)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    return logger
