"""Configure stdlib logging for applications using jobpool."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from jobpool.logging.log_paths import get_main_log_path


def setup_logging(
    log_level_name: str,
    console_logging: bool = False,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """Configure logging for jobpool.

    Logs go to a rotating file in the system-appropriate log directory.
    Console logging can be enabled for debugging.

    Args:
        log_level_name: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_logging: If True, also log to console via Rich
        log_file: Log file to use instead of the default location
        console: Rich console for console logging (stderr if None)
    """
    log_level = logging.getLevelName(log_level_name.upper())
    if log_file is None:
        log_file = get_main_log_path()

    pool_logger = logging.getLogger("jobpool")
    for handler in list(pool_logger.handlers):
        pool_logger.removeHandler(handler)
        handler.close()

    # 10 MB max, keep 3 backups
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    pool_logger.addHandler(file_handler)

    if console_logging:
        console_handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        console_handler.setLevel(log_level)
        pool_logger.addHandler(console_handler)

    pool_logger.setLevel(log_level)
