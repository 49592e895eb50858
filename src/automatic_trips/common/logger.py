# automatic_trips/common/logger.py
"""
Logging setup for automatic_trips.

Every module logs through `logging.getLogger(__name__)`, so all records end
up under the 'automatic_trips' package logger. setup_logger() attaches the
handlers to that one logger; nothing below it needs configuring.

The trips layer raises typed errors without logging them above DEBUG, so
failures are reported once, wherever the caller catches them.
"""

import logging
import sys
from pathlib import Path

from automatic_trips.config import LoggingConfig

__all__: list[str] = ['PACKAGE_LOGGER_NAME', 'setup_logger']

PACKAGE_LOGGER_NAME: str = 'automatic_trips'

LOG_FORMAT: str = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'


def _build_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)
    return handler


def _open_log_file(log_file_path: Path, level: int) -> logging.Handler:
    """Append-mode UTF-8 file handler; parent directories are created."""
    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
    return _build_handler(file_handler, level)


def setup_logger(
    logging_level: int | None = None,
    config: LoggingConfig | None = None,
) -> logging.Logger:
    """
    Configure the 'automatic_trips' package logger.

    Safe to call repeatedly: handlers from a previous call are removed
    first, so output is never duplicated.

    Args:
        logging_level: Console level when no config is given. Defaults to
            INFO.
        config: Validated logging section of the config file. When given,
            it decides the console level and whether a log file is written,
            and logging_level is ignored.

    Returns:
        The package logger.

    Example:
        >>> setup_logger(logging_level=logging.DEBUG)
        >>> setup_logger(config=load_config().logging)
    """
    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.handlers.clear()

    if config is not None:
        console_level: int = config.get_console_level_int()
        file_level: int | None = config.get_file_level_int()
    else:
        console_level = logging.INFO if logging_level is None else logging_level
        file_level = None

    console_handler = logging.StreamHandler(sys.stdout)
    package_logger.addHandler(_build_handler(console_handler, console_level))
    handler_levels: list[int] = [console_level]

    if config is not None and config.file_path is not None and file_level is not None:
        package_logger.addHandler(_open_log_file(config.file_path, file_level))
        handler_levels.append(file_level)

        if console_level <= logging.INFO:
            print(f'Writing trip client logs to {config.file_path}', file=sys.stderr)

    # The logger must pass everything the most verbose handler wants
    package_logger.setLevel(min(handler_levels))

    return package_logger
