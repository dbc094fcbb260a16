"""Logging setup for quest-sync.

Console records go through rich on stderr so they never interleave with the
interactive prompts on stdout. The optional log file keeps the whole session
at DEBUG level.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s - %(location)-32s - %(levelname)-8s - %(message)s"

# Loggers of libraries we import that are chatty at DEBUG
QUIET_LOGGERS = ("dotenv", "dotenv.main", "markdown_it")


class LocationFormatter(logging.Formatter):
    """Formatter exposing ``module:line`` as one ``location`` field."""

    def format(self, record: Any) -> str:
        """Format log record with location field."""
        record.location = f"{record.name.rsplit('.', 1)[-1]}:{record.lineno}"
        return super().format(record)


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=level <= logging.DEBUG,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
    return handler


def _file_handler(
    log_file: Path, max_file_size: int, backup_count: int
) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_file_size,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        LocationFormatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    return handler


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[Path] = None,
    console_output: bool = True,
    max_file_size: int = 2 * 1024 * 1024,
    backup_count: int = 2,
) -> None:
    """Set up application logging.

    Args:
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a rotating session log
        console_output: Whether to log to the terminal at all
        max_file_size: Size in bytes at which the log file rotates
        backup_count: Number of rotated files to keep
    """
    console_level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    root_level = console_level
    if console_output:
        root_logger.addHandler(_console_handler(console_level))
    if log_file:
        root_logger.addHandler(_file_handler(log_file, max_file_size, backup_count))
        root_level = logging.DEBUG
    root_logger.setLevel(root_level)

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized, console level %s", log_level.upper())
    if log_file:
        logger.debug("Session log: %s", log_file)


def configure_third_party_loggers() -> None:
    """Keep library loggers at WARNING even when the app logs at DEBUG."""
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
