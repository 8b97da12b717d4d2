"""Tests for centralized logging configuration."""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import cast

import pytest

from riskplan.system import LoggerFactory, LoggingConfig
from riskplan.system.log_system import DEFAULT_LOG_FILE, LogLevel, render_console


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before and after each test."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


def test_default_configuration():
    """Test logger factory with default configuration."""
    logger = LoggerFactory.get_logger()

    assert LoggerFactory.is_configured()
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")

    config = LoggerFactory.get_config()
    assert config.level == "INFO"
    assert config.format == "console"
    # File output is opt-in
    assert config.enable_file is False
    assert config.file_level == "WARNING"


def test_console_handler_writes_to_stderr():
    """Test console output never mixes with CLI tables on stdout."""
    LoggerFactory.configure(LoggingConfig())

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.StreamHandler)]

    assert any(h.stream is sys.stderr for h in handlers)


def test_explicit_configuration():
    """Test configuring logger factory explicitly."""
    config = LoggingConfig(level="DEBUG", format="json", enable_file=False)

    LoggerFactory.configure(config)

    assert LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "DEBUG"
    assert LoggerFactory.get_config().format == "json"


def test_auto_configure_on_first_use():
    """Test that logger auto-configures with defaults on first use."""
    assert not LoggerFactory.is_configured()

    LoggerFactory.get_logger("riskplan.test")

    assert LoggerFactory.is_configured()


def test_file_logging_writes_json_lines(tmp_path):
    """Test file output is one JSON object per line."""
    log_file = tmp_path / "riskplan.log"
    LoggerFactory.configure(
        LoggingConfig(level="INFO", enable_file=True, file_path=log_file, file_level="DEBUG", file_rotation=False)
    )
    logger = LoggerFactory.get_logger()

    logger.warning("strategy.risk.capped", strategy="conservative", requested="5", applied="1.0")

    record = json.loads(log_file.read_text().strip())
    assert record["event"] == "strategy.risk.capped"
    assert record["strategy"] == "conservative"
    assert record["level"].upper() == "WARNING"
    assert "log_timestamp" in record


def test_file_logging_without_path_uses_default(tmp_path):
    """Test enabling file logging without path falls back to logs/riskplan.log."""
    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=None))

    assert LoggerFactory.get_config().file_path == DEFAULT_LOG_FILE
    assert str(DEFAULT_LOG_FILE) == "logs/riskplan.log"
    # Relative to the working directory (tmp_path in tests)
    assert (tmp_path / "logs").is_dir()


def test_file_logging_creates_directory(tmp_path):
    log_file = tmp_path / "logs" / "subdir" / "test.log"

    LoggerFactory.configure(LoggingConfig(enable_file=True, file_path=log_file, file_rotation=False))
    LoggerFactory.get_logger().warning("test")

    assert log_file.exists()


def test_rotating_file_handler(tmp_path):
    log_file = tmp_path / "rotating.log"

    LoggerFactory.configure(
        LoggingConfig(enable_file=True, file_path=log_file, file_rotation=True, max_file_size_mb=1, backup_count=3)
    )

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    handler = next((h for h in handlers if str(log_file) in str(h.baseFilename)), None)
    assert handler is not None
    assert handler.maxBytes == 1 * 1024 * 1024
    assert handler.backupCount == 3


def test_file_level_independent_from_console_level(tmp_path):
    """Test that file log level can be lower than console level."""
    log_file = tmp_path / "debug.log"
    LoggerFactory.configure(
        LoggingConfig(level="WARNING", enable_file=True, file_path=log_file, file_level="DEBUG", file_rotation=False)
    )
    logger = LoggerFactory.get_logger()

    logger.debug("debug message")
    logger.warning("warning message")

    events = [json.loads(line)["event"] for line in log_file.read_text().splitlines() if line.strip()]
    assert "debug message" in events
    assert "warning message" in events


@pytest.mark.parametrize("level_str", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
def test_log_levels(level_str):
    LoggerFactory.configure(LoggingConfig(level=cast(LogLevel, level_str)))

    assert LoggerFactory.get_config().level == level_str
    assert logging.getLogger().level == getattr(logging, level_str)


def test_invalid_level_rejected():
    with pytest.raises(ValueError):
        LoggingConfig(level="LOUD")  # type: ignore[arg-type]


def test_reset_clears_configuration():
    LoggerFactory.configure(LoggingConfig(level="DEBUG"))

    LoggerFactory.reset()

    assert not LoggerFactory.is_configured()
    assert LoggerFactory.get_config().level == "INFO"


def test_configure_does_not_mutate_caller_config():
    config = LoggingConfig(enable_file=True, file_path=None)

    LoggerFactory.configure(config)

    assert config.file_path is None
    assert LoggerFactory.get_config().file_path == DEFAULT_LOG_FILE


@pytest.mark.parametrize("timestamp_format", ["iso", "compact", "time"])
def test_timestamp_formats(tmp_path, timestamp_format):
    log_file = tmp_path / "ts.log"
    LoggerFactory.configure(
        LoggingConfig(enable_file=True, file_path=log_file, file_rotation=False, timestamp_format=timestamp_format)
    )

    LoggerFactory.get_logger().warning("registry.discover.module_failed")

    record = json.loads(log_file.read_text().strip())
    assert record["log_timestamp"]


def test_console_renderer_format():
    """Test console lines read: timestamp [level] event | key=value (module:line)."""
    line = render_console(
        None,
        "warning",
        {
            "log_timestamp": "251022-205007",
            "level": "warning",
            "event": "strategy.risk.capped",
            "logger": "riskplan.libraries.strategies.buildin.conservative",
            "filename": "conservative.py",
            "lineno": 51,
            "symbol": "BTC-USDT",
            "_record": object(),
        },
    )

    assert line == "251022-205007 [warning] strategy.risk.capped | symbol=BTC-USDT (conservative:51)"


def test_console_renderer_without_context():
    line = render_console(None, "info", {"event": "risk.profile.loaded", "level": "info"})

    assert line == "[info] risk.profile.loaded"
