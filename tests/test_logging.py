"""Tests for the fbcount logging module.

Copyright © 2025 Pixelgen Technologies AB.
"""

import logging

from fbcount.logging import ColorFormatter, DefaultCliFormatter, LoggingSetup
from fbcount.utils import timer


def test_timer(caplog):
    @timer
    def my_func():
        return "foo"

    with caplog.at_level(logging.INFO):
        res = my_func()
        assert res == "foo"
        assert "Finished fbcount my_func in" in caplog.text


def test_verbose_logging_is_activated(tmp_path):
    with LoggingSetup(tmp_path / "fbcount.log", verbose=True):
        root_logger = logging.getLogger()
        assert root_logger.getEffectiveLevel() == logging.DEBUG


def test_verbose_logging_is_deactivated(tmp_path):
    with LoggingSetup(tmp_path / "fbcount.log", verbose=False):
        root_logger = logging.getLogger()
        assert root_logger.getEffectiveLevel() == logging.INFO


def test_logging_setup_restores_handlers():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    with LoggingSetup(None, verbose=True):
        assert root_logger.handlers != handlers

    assert root_logger.handlers == handlers
    assert root_logger.level == level


def test_log_file(tmp_path):
    log_file = tmp_path / "fbcount.log"

    with LoggingSetup(log_file, verbose=False):
        logging.getLogger("fbcount.test").info("This is an info message")
        logging.getLogger("fbcount.test").debug("This is a debug message")

    content = log_file.read_text()
    assert "This is an info message" in content
    assert "This is a debug message" not in content


def test_log_file_custom_logger(tmp_path):
    log_file = tmp_path / "fbcount.log"
    logger = logging.getLogger("fbcount.custom")

    with LoggingSetup(log_file, verbose=True, logger=logger):
        logger.debug("This is a debug message")

    assert "This is a debug message" in log_file.read_text()
    assert logger.handlers == []


def test_cli_formatter():
    formatter = DefaultCliFormatter()
    info = logging.LogRecord("fbcount", logging.INFO, __file__, 1, "hello", None, None)
    warning = logging.LogRecord(
        "fbcount", logging.WARNING, __file__, 1, "careful", None, None
    )

    assert formatter.format(info) == "hello"
    assert formatter.format(warning) == "WARNING: careful"


def test_color_formatter():
    formatter = ColorFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    record = logging.LogRecord(
        "fbcount", logging.ERROR, __file__, 1, "line 1\nline 2", None, None
    )

    lines = formatter.format(record).splitlines()

    assert len(lines) == 2
    assert lines[0].endswith("line 1")
    assert "ERROR" in lines[1]
