"""Logging for ShareBudget.

All modules log through children of the ``sharebudget`` logger. Once the
registry has resolved the deployment environment, every line written by
the handlers installed here carries it, so logs from test runs and from
production builds can be told apart in the same file.

Usage:
    from config.logging_config import setup_logging, get_logger

    setup_logging(data_dir=Path.home() / ".sharebudget")
    logger = get_logger(__name__)
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from config.constants import STORAGE

ROOT_LOGGER_NAME = 'sharebudget'
LOG_FORMAT = '%(asctime)s - [%(environment)s] %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
UNRESOLVED = 'unresolved'

_environment_label: str = UNRESOLVED


class EnvironmentFilter(logging.Filter):
    """Stamps each record with the current deployment environment."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.environment = _environment_label
        return True


def set_log_environment(label: Optional[str]) -> None:
    """Record the environment shown on subsequent log lines."""
    global _environment_label
    _environment_label = label or UNRESOLVED


def setup_logging(
    data_dir: Optional[Path] = None,
    debug: bool = False,
    console_output: bool = True,
) -> logging.Logger:
    """Install a rotating file handler (and optionally stderr) on the root logger.

    Calling it again replaces the handlers from the previous call.
    """
    if data_dir is None:
        data_dir = Path.home() / STORAGE.DATA_DIR_NAME
    data_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        data_dir / STORAGE.LOG_FILE,
        maxBytes=STORAGE.LOG_MAX_BYTES,
        backupCount=STORAGE.LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    handlers = [file_handler]

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
        handlers.append(console_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(EnvironmentFilter())
        root_logger.addHandler(handler)

    root_logger.debug(f"Logging to {data_dir / STORAGE.LOG_FILE}")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Child of the root logger named after the last two parts of `name`."""
    short_name = '.'.join(name.split('.')[-2:])
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{short_name}')


class LogContext:
    """Logs how long the wrapped block took, or that it failed."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[datetime] = None

    def __enter__(self):
        self.start_time = datetime.now()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = (datetime.now() - self.start_time).total_seconds() * 1000
        if exc_type:
            self.logger.error(f"{self.operation} failed after {duration:.0f}ms: {exc_val}")
        else:
            self.logger.log(self.level, f"{self.operation} completed in {duration:.0f}ms")
        return False
