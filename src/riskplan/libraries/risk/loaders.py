"""Risk profile loader.

Loads named risk profiles from YAML and turns them into configured Strategy
instances via the strategy registry.

Search Order:
1. Built-in profiles: src/riskplan/libraries/risk/builtin/{name}.yaml
2. Custom profiles: {custom_libraries.risk_profiles}/{name}.yaml (from riskplan.yaml)

Profile shape:
    risk_profile:
      strategy: risk-ratio
      config:
        rr_ratio: 2.0

Design Principles:
- Clear error messages for missing/invalid profiles
- Validation at load time (fail fast)
- Custom path loaded from system configuration (not hardcoded)
"""

from pathlib import Path
from typing import Any

import structlog
import yaml

from riskplan.libraries.registry import RegistryError, StrategyRegistry, get_strategy_registry
from riskplan.libraries.risk.errors import RiskError
from riskplan.libraries.strategies.base import Strategy
from riskplan.system.config import get_system_config

logger = structlog.get_logger(__name__)

BUILTIN_DIR = Path(__file__).parent / "builtin"
ROOT_KEY = "risk_profile"


def load_profile(
    name: str,
    custom_path: str | Path | None = None,
    registry: StrategyRegistry | None = None,
) -> Strategy:
    """Load a risk profile and build its strategy.

    Args:
        name: Profile name (without .yaml extension)
        custom_path: Optional custom search path (overrides system config)
        registry: Registry used to resolve the strategy name (default: global)

    Returns:
        Strategy configured as the profile describes

    Raises:
        FileNotFoundError: If the profile is not found in any search location
        ValueError: If the YAML is invalid, malformed or names an unknown strategy

    Examples:
        >>> strategy = load_profile("conservative")
        >>> strategy.name
        'conservative'

        >>> strategy = load_profile("my_profile", custom_path="profiles")
    """
    builtin_path = BUILTIN_DIR / f"{name}.yaml"
    custom_dir = _custom_dir(custom_path)
    custom_profile_path = custom_dir / f"{name}.yaml" if custom_dir else None

    if builtin_path.exists():
        profile_path = builtin_path
    elif custom_profile_path and custom_profile_path.exists():
        profile_path = custom_profile_path
    else:
        custom_path_msg = (
            f"  2. Custom: {custom_profile_path}\n"
            if custom_profile_path
            else "  2. Custom: (not configured - set custom_libraries.risk_profiles in riskplan.yaml)\n"
        )
        raise FileNotFoundError(
            f"Profile '{name}' not found. Searched:\n"
            f"  1. Built-in: {builtin_path}\n"
            f"{custom_path_msg}"
            f"\nAvailable built-in profiles: {list_builtin_profiles()}\n"
            f"Available custom profiles: {list_custom_profiles(custom_path)}"
        )

    try:
        with open(profile_path, "r") as f:
            raw_profile = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML from {profile_path}: {e}") from e

    strategy_name, overrides = _parse_profile(raw_profile, profile_path)

    registry = registry or get_strategy_registry()
    try:
        strategy = registry.create(strategy_name, **overrides)
    except (RegistryError, RiskError) as e:
        raise ValueError(f"Failed to build profile from {profile_path}: {e}") from e

    logger.debug("risk.profile.loaded", profile=name, strategy=strategy.name, path=str(profile_path))
    return strategy


def list_builtin_profiles() -> list[str]:
    """List available built-in profile names.

    Example:
        >>> list_builtin_profiles()
        ['conservative', 'default', 'scaled', 'trailing']
    """
    if not BUILTIN_DIR.exists():
        return []
    return sorted(p.stem for p in BUILTIN_DIR.glob("*.yaml"))


def list_custom_profiles(custom_path: str | Path | None = None) -> list[str]:
    """List available custom profile names (empty when not configured)."""
    custom_dir = _custom_dir(custom_path)
    if custom_dir is None or not custom_dir.exists():
        return []
    return sorted(p.stem for p in custom_dir.glob("*.yaml"))


def _custom_dir(custom_path: str | Path | None) -> Path | None:
    if custom_path:
        return Path(custom_path)
    configured = get_system_config().custom_libraries.risk_profiles
    return Path(configured) if configured is not None else None


def _parse_profile(raw_profile: Any, source_path: Path) -> tuple[str, dict[str, Any]]:
    """Extract (strategy name, config overrides) from a raw profile.

    Raises:
        ValueError: If the profile structure is invalid
    """
    if not isinstance(raw_profile, dict) or ROOT_KEY not in raw_profile:
        raise ValueError(f"Profile file {source_path} must have '{ROOT_KEY}' root key")

    profile = raw_profile[ROOT_KEY]
    if not isinstance(profile, dict):
        raise ValueError(f"Profile {source_path}: '{ROOT_KEY}' must be a mapping")

    strategy_name = profile.get("strategy")
    if not isinstance(strategy_name, str) or not strategy_name:
        raise ValueError(f"Profile {source_path}: 'strategy' must be a non-empty string")

    overrides = profile.get("config") or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"Profile {source_path}: 'config' must be a mapping")

    unknown = set(profile) - {"strategy", "config", "description"}
    if unknown:
        raise ValueError(f"Profile {source_path}: unknown keys {sorted(unknown)}")

    return strategy_name, overrides


__all__ = [
    "load_profile",
    "list_builtin_profiles",
    "list_custom_profiles",
]
