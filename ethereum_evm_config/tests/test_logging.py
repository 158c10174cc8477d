"""
Tests for the logging module.
"""

import io
import logging
import re
from pathlib import Path
from unittest.mock import patch

import pytest

from ..logging import (
    VERBOSE_LEVEL,
    ColorFormatter,
    EvmLogger,
    LogLevel,
    UTCFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Restore the root logger's handlers and level after each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def test_verbose_level_registered():
    """Test that the custom log level is properly registered."""
    assert logging.getLevelName(VERBOSE_LEVEL) == "VERBOSE"
    assert logging.getLevelName("VERBOSE") == VERBOSE_LEVEL


def test_get_logger():
    """Test that get_logger returns a properly typed logger."""
    logger = get_logger("test_logger")
    assert isinstance(logger, EvmLogger)
    assert logger.name == "test_logger"


def test_verbose_method():
    """Test the verbose() method logs at the expected level."""
    log_output = io.StringIO()
    logger = get_logger("test_evm_logger")
    handler = logging.StreamHandler(log_output)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        logger.verbose("This is a verbose message")
        assert "VERBOSE: This is a verbose message" in log_output.getvalue()
    finally:
        logger.removeHandler(handler)


def test_utc_formatter():
    """Test that UTCFormatter formats timestamps correctly."""
    formatter = UTCFormatter(fmt="%(asctime)s: %(message)s")
    record = logging.makeLogRecord({"msg": "Test message", "created": 1609459200.0})
    assert re.match(r"2021-01-01 00:00:00\.\d{3}\+00:00: Test message", formatter.format(record))


def test_color_formatter(monkeypatch):
    """Test that ColorFormatter adds color codes only outside of Docker."""
    formatter = ColorFormatter(fmt="[%(levelname)s] %(message)s")
    record = logging.makeLogRecord(
        {"levelno": logging.ERROR, "levelname": "ERROR", "msg": "Error message"}
    )

    monkeypatch.setattr(ColorFormatter, "running_in_docker", False)
    assert "\033[31mERROR\033[0m" in formatter.format(record)

    monkeypatch.setattr(ColorFormatter, "running_in_docker", True)
    formatted = formatter.format(record)
    assert "\033[31mERROR\033[0m" not in formatted
    assert "ERROR" in formatted


@pytest.mark.parametrize(
    "value, expected",
    [("INFO", logging.INFO), ("debug", logging.DEBUG), ("verbose", VERBOSE_LEVEL), ("30", 30)],
)
def test_log_level_from_cli(value: str, expected: int):
    """Test parsing of log levels given on the command line."""
    assert LogLevel.from_cli(value) == expected


def test_log_level_invalid():
    """Test that unknown log levels are rejected."""
    with pytest.raises(ValueError, match="Invalid log level"):
        LogLevel.from_cli("chatty")


def test_configure_logging_defaults():
    """Test configure_logging with default parameters."""
    with patch("sys.stdout", new=io.StringIO()):
        handler = configure_logging()
        root_logger = logging.getLogger()
        assert any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers)
        assert root_logger.level == logging.INFO
        assert handler is None


def test_configure_logging_with_file(tmp_path: Path):
    """Test configure_logging with file output."""
    log_file = tmp_path / "logs" / "evm.log"
    handler = configure_logging(log_level="VERBOSE", log_file=log_file, log_to_stdout=False)
    assert isinstance(handler, logging.FileHandler)
    assert logging.getLogger().level == VERBOSE_LEVEL

    get_logger("test_config").info("Test log message")
    handler.flush()
    assert "Test log message" in log_file.read_text()
