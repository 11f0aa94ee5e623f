"""
Tests for the logging configuration.
"""

import logging
import os

import pytest

from geoshape.core.logging_config import (
    EDIT_LOGGERS,
    LOG_FILENAME,
    SafeRotatingFileHandler,
    get_logger,
    set_edit_tracing,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    """Restores the root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_rotating_file(tmp_path, restore_root_logger):
    """Test that setup_logging creates the log file in the given directory."""
    log_dir = tmp_path / "logs"

    setup_logging(debug_mode=True, log_to_console=False, log_dir=str(log_dir))

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], SafeRotatingFileHandler)
    assert os.path.exists(log_dir / LOG_FILENAME)


def test_setup_logging_replaces_handlers(tmp_path, restore_root_logger):
    """Test that repeated setup does not duplicate handlers."""
    setup_logging(log_to_console=True, log_dir=str(tmp_path))
    setup_logging(log_to_console=True, log_dir=str(tmp_path))

    root = restore_root_logger
    assert root.level == logging.INFO
    assert len(root.handlers) == 2


def test_get_logger_returns_named_logger():
    assert get_logger("geoshape.test").name == "geoshape.test"


def test_edit_tracing_reaches_info_level_handlers(tmp_path, restore_root_logger):
    """Test that edit tracing logs DEBUG edits while the root stays at INFO."""
    setup_logging(log_to_console=False, log_dir=str(tmp_path))
    try:
        set_edit_tracing(True)
        logging.getLogger("geoshape.core.marker_index").debug("traced edit")
        logging.getLogger("geoshape.core.spherical").debug("not traced")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = (tmp_path / LOG_FILENAME).read_text(encoding="utf-8")
        assert "traced edit" in content
        assert "not traced" not in content
    finally:
        set_edit_tracing(False)

    for name in EDIT_LOGGERS:
        assert logging.getLogger(name).level == logging.NOTSET
