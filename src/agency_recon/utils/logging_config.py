"""Logging configuration for the agency reconciliation tool."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler

LOGGER_NAME = "agency_recon"

FILE_LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)


def _resolve_level(level: Union[int, str]) -> int:
    """Accept either a numeric level or a level name such as "DEBUG"."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    log_format: Optional[str] = None,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure logging for the ``agency_recon`` package.

    Console output goes through rich so it interleaves cleanly with the
    CLI's progress spinners and tables. A rotating file handler is added
    when ``log_file`` is given and always captures DEBUG.

    Args:
        level: Logging level, numeric or by name
        log_file: Optional path to log file
        log_format: Optional custom format for the plain console handler
        rich_console: Use rich for console output (plain StreamHandler if False)

    Returns:
        The configured package logger
    """
    numeric_level = _resolve_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    # The file handler filters on its own, console stays at numeric_level
    logger.setLevel(logging.DEBUG if log_file else numeric_level)
    logger.handlers = []

    if rich_console:
        console_handler: logging.Handler = RichHandler(
            show_path=False, rich_tracebacks=True, markup=False
        )
        console_handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter(
                log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        )
    console_handler.setLevel(numeric_level)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger of the package logger."""
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
