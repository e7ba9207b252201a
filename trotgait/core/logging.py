"""Logging setup: colored console output plus optional per-run log file"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "trotgait"

CONSOLE_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)-28s │ %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"

_ANSI_RESET = "\033[0m"
_ANSI_NAME = "\033[34m"
_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level and logger name."""

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy; other handlers share the record
        tinted = logging.makeLogRecord(record.__dict__)
        color = _LEVEL_COLORS.get(record.levelno, _ANSI_RESET)
        tinted.levelname = f"{color}{record.levelname}{_ANSI_RESET}"
        tinted.name = f"{_ANSI_NAME}{record.name}{_ANSI_RESET}"
        return super().format(tinted)


def _console_handler(color: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    formatter_class = ColoredFormatter if color else logging.Formatter
    handler.setFormatter(formatter_class(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_file: str, log_dir: str) -> logging.FileHandler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    handler = logging.FileHandler(directory / f"{log_file}_{stamp}.log")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_dir: str = "logs",
    color: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure the ``trotgait`` logger hierarchy.

    Handlers are attached on the first call only; later calls just change
    the level.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Log file stem; a timestamp is appended
        log_dir: Directory for log files
        color: Force colored console output on or off. By default it is
            on when stdout is a terminal.

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, level.upper()))
    if package_logger.handlers:
        return package_logger

    package_logger.addHandler(_console_handler(sys.stdout.isatty() if color is None else color))

    if log_file:
        handler = _file_handler(log_file, log_dir)
        package_logger.addHandler(handler)
        package_logger.info(f"Logging to file: {handler.baseFilename}")

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the trotgait namespace, e.g. ``get_logger("motion.pose")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
