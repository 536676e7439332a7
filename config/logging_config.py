"""
Logging setup for the export pipeline, API and CLI.

Each named logger gets two handlers on first use: the console at INFO and a
size-rotated file under logs/ at DEBUG. ``set_debug`` lowers the console
threshold at runtime (``--debug`` on the CLI, ``DEBUG=true`` for the API).
"""
import logging
import logging.handlers
from pathlib import Path
from .constants import (
    LOG_LEVEL, LOG_FORMAT, LOG_FILE,
    LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
)

DEFAULT_LOGGER_NAME = 'prompt_exporter'


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _file_handler() -> logging.Handler:
    log_path = Path(LOG_FILE)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8',
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logger(name: str = None) -> logging.Logger:
    """
    Return the named logger, attaching console and file handlers once.

    Args:
        name: Module name (``__name__``); defaults to 'prompt_exporter'.
    """
    logger = logging.getLogger(name or DEFAULT_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL))
    logger.addHandler(_console_handler())
    logger.addHandler(_file_handler())
    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Module-level entry point: ``logger = get_logger(__name__)``."""
    return setup_logger(name)


def set_debug(enabled: bool) -> None:
    """Switch the console output of every configured logger to DEBUG (or back to INFO)."""
    level = logging.DEBUG if enabled else logging.INFO
    for existing in logging.Logger.manager.loggerDict.values():
        if not isinstance(existing, logging.Logger):
            continue
        for handler in existing.handlers:
            # RotatingFileHandler is a StreamHandler too; the file stays at DEBUG
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, logging.handlers.RotatingFileHandler
            ):
                handler.setLevel(level)
        if enabled:
            existing.setLevel(logging.DEBUG)


logger = setup_logger(DEFAULT_LOGGER_NAME)
