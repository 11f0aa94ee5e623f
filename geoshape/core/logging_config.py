"""
Logging Configuration Module.

Sets up the root logger of the shape editor: a size-rotated log file plus an
optional console stream. Editing-core modules log every structural edit
(insertions, deletions, holes) at DEBUG; set_edit_tracing() turns those on
without switching the whole application to DEBUG.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import List

LOG_DIR = "logs"
LOG_FILENAME = "geoshape.log"
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that report individual marker and shape edits
EDIT_LOGGERS = (
    "geoshape.core.shape_markers",
    "geoshape.core.marker_index",
    "geoshape.core.shape_builder",
    "geoshape.app.shape_edit_handler",
)


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that survives a locked log file on Windows.

    Rotation renames the file, which Windows refuses while another handle
    has it open. The handler then keeps appending to the current file and
    tries again at the next rollover.
    """

    def doRollover(self) -> None:
        try:
            super().doRollover()
        except PermissionError:
            if sys.platform != "win32":
                raise


def _log_path(log_dir: str) -> str:
    """Returns the log file path, falling back to the working directory."""
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create log directory {log_dir}: {e}. Using current dir.")
        return LOG_FILENAME
    return os.path.join(log_dir, LOG_FILENAME)


def _build_handlers(log_path: str, log_to_console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    try:
        handlers.append(
            SafeRotatingFileHandler(
                log_path,
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
        )
    except OSError as e:
        print(f"CRITICAL: Could not set up file logging: {e}")
    if log_to_console:
        handlers.append(logging.StreamHandler())
    return handlers


def setup_logging(
    debug_mode: bool = False, log_to_console: bool = True, log_dir: str = LOG_DIR
) -> None:
    """
    Configures the root logger for an editing session.

    Replaces any handlers installed by an earlier call, so calling it again
    (e.g. after loading a config file) does not duplicate output.

    Args:
        debug_mode (bool): Log at DEBUG instead of INFO.
        log_to_console (bool): Also log to stderr.
        log_dir (str): Directory of the rotating log file.
    """
    level = logging.DEBUG if debug_mode else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in _build_handlers(_log_path(log_dir), log_to_console):
        # Levels are decided by the loggers so edit tracing can pass through
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.info(f"Shape editing session started at {datetime.now().isoformat()}")


def set_edit_tracing(enabled: bool) -> None:
    """
    Logs every marker and shape edit regardless of the root level.

    Args:
        enabled (bool): True for DEBUG on the edit loggers, False to inherit.
    """
    level = logging.DEBUG if enabled else logging.NOTSET
    for name in EDIT_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Convenience function to get a logger with the given name.

    Args:
        name (str): The name of the logger (usually __name__).

    Returns:
        logging.Logger: The logger instance.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """
    Explicitly closes all logging handlers to release file locks.
    """
    logging.shutdown()
