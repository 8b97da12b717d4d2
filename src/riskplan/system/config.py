"""
System configuration for riskplan.

One configuration for the whole library: calculator defaults, logging and
custom library locations. Values are loaded from YAML and deep-merged over
built-in defaults, so a config file only needs the keys it changes.

Search order for SystemConfig.load() without an explicit path:
1. $RISKPLAN_CONFIG
2. ./riskplan.yaml
3. Built-in defaults

String values may reference environment variables as ${VAR} or
${VAR:-default}.
"""

import os
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from riskplan.system.log_system import LoggingConfig as LoggerConfig

CONFIG_ENV_VAR = "RISKPLAN_CONFIG"
DEFAULT_CONFIG_FILE = "riskplan.yaml"

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


@dataclass
class CalculatorConfig:
    """Calculator defaults.

    Attributes:
        default_max_leverage: Leverage ceiling used when a caller passes none
    """

    default_max_leverage: int = 125


@dataclass
class CustomLibrariesConfig:
    """Locations of user-provided libraries (None = not configured)."""

    risk_profiles: str | None = None
    strategies: str | None = None


@dataclass
class LoggingConfig:
    """Logging section of the system config (plain data, YAML friendly)."""

    level: str = "INFO"
    format: str = "console"
    timestamp_format: str = "compact"
    enable_file: bool = False
    file_path: str = "logs/riskplan.log"
    file_level: str = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the pydantic model consumed by LoggerFactory."""
        return LoggerConfig(
            level=self.level,  # type: ignore[arg-type]
            format=self.format,  # type: ignore[arg-type]
            timestamp_format=self.timestamp_format,  # type: ignore[arg-type]
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,  # type: ignore[arg-type]
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete system configuration."""

    calculator: CalculatorConfig = field(default_factory=CalculatorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    custom_libraries: CustomLibrariesConfig = field(default_factory=CustomLibrariesConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, falling back to defaults.

        Args:
            path: Explicit config file. A missing file yields defaults.

        Returns:
            SystemConfig with file values merged over defaults

        Raises:
            ValueError: If the file exists but is not valid YAML, not a mapping,
                or has unknown sections/keys
        """
        config_path = _resolve_config_path(path)
        if config_path is None or not config_path.exists():
            return cls()

        try:
            with open(config_path, "r") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML from {config_path}: {e}")

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping at the top level")

        merged = _deep_merge(asdict(cls()), _substitute_env_vars(raw))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dict.

        Raises:
            ValueError: Unknown section or key, or a section that is not a mapping
        """
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown config section(s) {sorted(unknown)}; expected {sorted(_SECTIONS)}")

        sections: dict[str, Any] = {}
        for name, section_class in _SECTIONS.items():
            values = data.get(name, {})
            if not isinstance(values, dict):
                raise ValueError(f"Config section '{name}' must be a mapping, got {type(values).__name__}")
            allowed = {f.name for f in fields(section_class)}
            unknown_keys = set(values) - allowed
            if unknown_keys:
                raise ValueError(
                    f"Unknown key(s) {sorted(unknown_keys)} in config section '{name}'; expected {sorted(allowed)}"
                )
            sections[name] = section_class(**values)
        return cls(**sections)


_SECTIONS: dict[str, type] = {
    "calculator": CalculatorConfig,
    "logging": LoggingConfig,
    "custom_libraries": CustomLibrariesConfig,
}


def _resolve_config_path(path: Path | str | None) -> Path | None:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    local = Path(DEFAULT_CONFIG_FILE)
    return local if local.exists() else None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base (override wins)."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Expand ${VAR} and ${VAR:-default} in all strings of a nested structure."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(_expand_env_var, value)
    return value


def _expand_env_var(match: re.Match[str]) -> str:
    """Environment value, else the :- default, else the placeholder unchanged."""
    name, default = match.group(1), match.group(2)
    if name in os.environ:
        return os.environ[name]
    if default is not None:
        return default
    return match.group(0)


_system_config: SystemConfig | None = None


def get_system_config() -> SystemConfig:
    """Get the process-wide system config (loaded on first use)."""
    global _system_config
    if _system_config is None:
        _system_config = SystemConfig.load()
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force a reload, optionally from an explicit path."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
