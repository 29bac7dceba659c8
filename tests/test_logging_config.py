"""
Tests for logging setup and the error handler.
"""
import logging
import logging.handlers

import pytest

from error_handler import ErrorHandler
from logging_config import ErrorRaisingHandler, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_file_logging(tmp_path):
    log_file = tmp_path / "logs" / "timeslice.log"
    setup_logging(raise_on_error=False, log_file=str(log_file))

    handlers = logging.getLogger().handlers
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)
    get_logger("timeline_test").warning("hello from test")
    for handler in handlers:
        handler.flush()
    assert "hello from test" in log_file.read_text(encoding="utf-8")


def test_empty_log_file_disables_file_logging():
    setup_logging(raise_on_error=False, log_file="")
    handlers = logging.getLogger().handlers
    assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)


def test_raise_on_error():
    setup_logging(raise_on_error=True, log_file="")
    assert any(isinstance(h, ErrorRaisingHandler) for h in logging.getLogger().handlers)
    with pytest.raises(RuntimeError, match="boom"):
        logging.getLogger("timeline_test").error("boom")


def test_log_exception_message(caplog):
    message = ErrorHandler.log_exception(ValueError("bad scale"), "Projecting")
    assert message == "ValueError: bad scale"
    assert "Projecting: ValueError: bad scale" in caplog.text


def test_show_warning(caplog):
    ErrorHandler.show_warning("channel overflows", title="Head 1")
    assert "[Head 1] channel overflows" in caplog.text
