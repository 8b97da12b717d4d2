"""Centralized logging configuration for riskplan.

Everything goes through stdlib logging so structlog events and plain
``logging`` records share handlers:

- console: stderr, ``timestamp [level] event | key=value (module:line)`` or JSON
- file (opt-in): one JSON object per line, optionally rotated

stdout is left to the CLI tables.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_LOG_FILE = Path("logs/riskplan.log")

_TIMESTAMP_FORMATS = {
    "iso": "iso",
    "compact": "%y%m%d-%H%M%S",
    "time": "%H:%M:%S",
}


class LoggingConfig(BaseModel):
    """Configuration for logging system.

    Levels used by riskplan:
    - DEBUG: every position calculation, registry lookups, trailing stop moves
    - WARNING: risk/leverage capped by a strategy, rejected calculations
    """

    level: LogLevel = Field(default="INFO", description="Minimum log level for console output")
    format: Literal["console", "json"] = Field(default="console", description="Console output format")
    timestamp_format: Literal["iso", "compact", "time"] = Field(
        default="compact",
        description="iso: 2025-10-22T20:50:07Z, compact: 251022-205007, time: 20:50:07",
    )
    enable_file: bool = Field(default=False, description="Enable JSON logging to file")
    file_path: Path | None = Field(default=None, description="Log file (logs/riskplan.log if None)")
    file_level: LogLevel = Field(default="WARNING", description="Minimum log level for file output")
    file_rotation: bool = Field(default=True, description="Rotate the log file when it grows too large")
    max_file_size_mb: int = Field(default=10, ge=1)
    backup_count: int = Field(default=3, ge=0)


class LoggerFactory:
    """
    Configures structlog once per process.

    Example:
        LoggerFactory.configure(LoggingConfig(level="DEBUG"))
        logger = structlog.get_logger(__name__)
        logger.debug("strategy.position.calculated", symbol="BTC-USDT", leverage=2)
    """

    _config: LoggingConfig | None = None
    _configured: bool = False

    @classmethod
    def configure(cls, config: LoggingConfig | None = None) -> None:
        """
        Configure the logging system.

        Args:
            config: LoggingConfig instance. If None, uses default configuration.
                The instance is not modified; the effective copy is kept.
        """
        config = config or LoggingConfig()
        if config.enable_file and config.file_path is None:
            config = config.model_copy(update={"file_path": DEFAULT_LOG_FILE})
        cls._config = config

        pre_chain = cls._pre_chain(config.timestamp_format)

        console_handler = logging.StreamHandler(stream=sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=render_console if config.format == "console" else structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )
        handlers: list[logging.Handler] = [console_handler]
        root_level = logging.getLevelName(config.level)

        if config.enable_file:
            handlers.append(cls._file_handler(config, pre_chain))
            root_level = min(root_level, logging.getLevelName(config.file_level))

        logging.basicConfig(level=root_level, handlers=handlers, force=True)

        structlog.configure(
            processors=[
                *pre_chain,
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        cls._configured = True

    @staticmethod
    def _pre_chain(timestamp_format: str) -> list[Any]:
        """Processors shared by structlog and foreign stdlib records before rendering."""
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            # log_timestamp, so a logged plan's own timestamp field is never overwritten
            structlog.processors.TimeStamper(fmt=_TIMESTAMP_FORMATS[timestamp_format], utc=True, key="log_timestamp"),
            structlog.processors.CallsiteParameterAdder(
                [structlog.processors.CallsiteParameter.FILENAME, structlog.processors.CallsiteParameter.LINENO]
            ),
        ]

    @staticmethod
    def _file_handler(config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
        file_path = config.file_path or DEFAULT_LOG_FILE
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler: logging.Handler
        if config.file_rotation:
            handler = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=config.max_file_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        else:
            handler = logging.FileHandler(filename=str(file_path), encoding="utf-8")

        handler.setLevel(config.file_level)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )
        return handler

    @classmethod
    def get_logger(cls, name: str = "riskplan"):
        """Configured structlog logger (configures defaults on first use)."""
        if not cls._configured:
            cls.configure()
        return structlog.get_logger(name)

    @classmethod
    def get_config(cls) -> LoggingConfig:
        if cls._config is None:
            return LoggingConfig()
        return cls._config

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def reset(cls) -> None:
        """Drop handlers and structlog configuration (mainly for testing)."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.NOTSET)
        cls._config = None
        cls._configured = False
        structlog.reset_defaults()


def render_console(logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
    """Render ``timestamp [level] event | key=value (module:line)``."""
    timestamp = event_dict.pop("log_timestamp", "")
    level = event_dict.pop("level", method_name)
    event = event_dict.pop("event", "")
    filename = event_dict.pop("filename", "")
    lineno = event_dict.pop("lineno", "")
    event_dict.pop("logger", None)

    parts = [timestamp, f"[{level.lower()}]", str(event)]
    context = [f"{key}={value}" for key, value in sorted(event_dict.items()) if not key.startswith("_")]
    if context:
        parts.append("| " + " ".join(context))
    if filename and lineno:
        parts.append(f"({Path(filename).stem}:{lineno})")
    return " ".join(part for part in parts if part)
