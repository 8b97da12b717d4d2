"""
Strategy Registry - Lookup by Name and Auto-Discovery

Callers pick a risk strategy by name ("risk-ratio", "conservative", ...)
instead of importing concrete classes. Built-in strategies are registered
on first use; custom strategies can be discovered from a directory of
Python modules.

Philosophy:
- "Convention over configuration": subclass Strategy, give the config a name
- Validate ABC compliance at registration time
- Clean API for lookup and construction by name

Usage:
    registry = get_strategy_registry()
    print(registry.list_names())  # ['conservative', 'risk-ratio', 'scaled-exit', 'trailing-stop']

    strategy = registry.create("risk-ratio", rr_ratio=3)
    plan = strategy.calculate_position(params)
"""

import importlib.util
import inspect
import sys
from pathlib import Path
from typing import Any, Generic, Type, TypeVar

import structlog
from pydantic import ValidationError

from riskplan.libraries.risk.errors import ValidationFailedError
from riskplan.libraries.strategies.base import Strategy
from riskplan.libraries.strategies.buildin.conservative import ConservativeStrategy
from riskplan.libraries.strategies.buildin.risk_ratio import RiskRatioStrategy
from riskplan.libraries.strategies.buildin.scaled_exit import ScaledExitStrategy
from riskplan.libraries.strategies.buildin.trailing_stop import TrailingStopStrategy
from riskplan.system.config import get_system_config

logger = structlog.get_logger(__name__)

T = TypeVar("T")

BUILTIN_STRATEGIES: tuple[type[Strategy], ...] = (
    RiskRatioStrategy,
    ConservativeStrategy,
    ScaledExitStrategy,
    TrailingStopStrategy,
)


class RegistryError(Exception):
    """Base exception for registry errors."""

    pass


class ComponentNotFoundError(RegistryError):
    """Component not found in registry."""

    pass


class DuplicateComponentError(RegistryError):
    """Component already registered with this name."""

    pass


class InvalidComponentError(RegistryError):
    """Component does not meet requirements (ABC compliance, etc.)."""

    pass


class BaseRegistry(Generic[T]):
    """
    Base registry for validated, name-addressed components.

    Type Parameters:
        T: The base class type (e.g., Strategy)
    """

    def __init__(self, base_class: Type[T], component_type: str):
        self.base_class = base_class
        self.component_type = component_type
        self._registry: dict[str, Type[T]] = {}
        self._metadata: dict[str, dict[str, Any]] = {}

    def register(
        self,
        name: str,
        component_class: Type[T],
        metadata: dict[str, Any] | None = None,
        allow_override: bool = False,
    ) -> None:
        """
        Register a component class.

        Raises:
            InvalidComponentError: If component doesn't inherit from base class or is abstract
            DuplicateComponentError: If name already registered (and not allow_override)
        """
        if not inspect.isclass(component_class) or not issubclass(component_class, self.base_class):
            raise InvalidComponentError(f"{component_class!r} does not inherit from {self.base_class.__name__}")

        if inspect.isabstract(component_class):
            raise InvalidComponentError(f"{component_class.__name__} is abstract and cannot be registered")

        if name in self._registry and not allow_override:
            raise DuplicateComponentError(
                f"{self.component_type} '{name}' already registered "
                f"({self._registry[name].__module__}.{self._registry[name].__name__})"
            )

        self._registry[name] = component_class
        self._metadata[name] = metadata or {}

    def get(self, name: str) -> Type[T]:
        """
        Get component class by name.

        Raises:
            ComponentNotFoundError: If name not in registry
        """
        if name not in self._registry:
            available = ", ".join(sorted(self._registry.keys()))
            raise ComponentNotFoundError(f"{self.component_type} '{name}' not found. Available: {available}")

        return self._registry[name]

    def list_names(self) -> list[str]:
        """Sorted list of registered names."""
        return sorted(self._registry.keys())

    def list_components(self) -> dict[str, Type[T]]:
        return dict(self._registry)

    def get_metadata(self, name: str) -> dict[str, Any]:
        """
        Get metadata for a component.

        Raises:
            ComponentNotFoundError: If name not in registry
        """
        if name not in self._metadata:
            raise ComponentNotFoundError(f"{self.component_type} '{name}' not found")

        return dict(self._metadata[name])

    def clear(self) -> None:
        self._registry.clear()
        self._metadata.clear()

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, name: str) -> bool:
        return name in self._registry

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.component_type} count={len(self)}>"


class StrategyRegistry(BaseRegistry[Strategy]):
    """
    Registry for risk strategies, keyed by config name.

    Usage:
        registry = StrategyRegistry()
        registry.register_builtins()
        strategy = registry.create("conservative")
    """

    def __init__(self) -> None:
        super().__init__(Strategy, "strategy")

    @staticmethod
    def name_of(strategy_class: type[Strategy]) -> str:
        """Registry name declared by a strategy's config class default."""
        config_class = getattr(strategy_class, "config_class", None)
        if config_class is None:
            raise InvalidComponentError(f"{strategy_class.__name__} does not declare config_class")

        default = config_class.model_fields["name"].default
        if not isinstance(default, str) or not default:
            raise InvalidComponentError(f"{config_class.__name__} must give 'name' a non-empty default")
        return default

    def register_strategy(
        self,
        strategy_class: type[Strategy],
        source_type: str = "custom",
        allow_override: bool = False,
    ) -> str:
        """Register a strategy under its config name. Returns the name used."""
        name = self.name_of(strategy_class)
        metadata = {
            "source_type": source_type,
            "class_name": strategy_class.__name__,
            "module_name": strategy_class.__module__,
        }
        self.register(name, strategy_class, metadata, allow_override=allow_override)
        return name

    def register_builtins(self) -> None:
        for strategy_class in BUILTIN_STRATEGIES:
            self.register_strategy(strategy_class, source_type="buildin", allow_override=True)

    def create(self, name: str, **config_overrides: Any) -> Strategy:
        """
        Instantiate a registered strategy with optional config overrides.

        Raises:
            ComponentNotFoundError: Unknown strategy name
            ValidationFailedError: Overrides rejected by the strategy's config model
        """
        strategy_class = self.get(name)
        config_class = strategy_class.config_class
        try:
            config = config_class(**config_overrides)
        except ValidationError as e:
            raise ValidationFailedError(f"invalid config for strategy '{name}'", cause=e) from e

        logger.debug("registry.strategy.created", strategy=name, overrides=sorted(config_overrides))
        return strategy_class(config)

    def discover_from_module(self, module_path: Path, source_type: str = "custom") -> int:
        """
        Register every concrete Strategy subclass defined in a Python file.

        Modules that fail to import, and strategies whose name is already
        taken, are logged and skipped.

        Returns:
            Number of strategies registered from this module
        """
        if not module_path.is_file() or module_path.name.startswith("_"):
            return 0

        module_name = f"riskplan.registry.discovered.{module_path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, module_path)
        if spec is None or spec.loader is None:
            return 0

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module

        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            logger.warning(
                "registry.discover.module_failed",
                module=str(module_path),
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0

        count = 0
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if obj is Strategy or inspect.isabstract(obj) or not issubclass(obj, Strategy):
                continue
            if obj.__module__ != module.__name__:
                continue
            try:
                self.register_strategy(obj, source_type=source_type)
            except RegistryError as e:
                logger.warning(
                    "registry.discover.strategy_rejected",
                    module=str(module_path),
                    strategy_class=obj.__name__,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            count += 1

        return count

    def discover_from_directory(self, directory: Path, source_type: str = "custom") -> int:
        """Register strategies from every *.py file in directory (non-recursive)."""
        if not directory.is_dir():
            return 0
        return sum(self.discover_from_module(path, source_type) for path in sorted(directory.glob("*.py")))


_strategy_registry: StrategyRegistry | None = None


def get_strategy_registry() -> StrategyRegistry:
    """
    Get the process-wide strategy registry.

    Built-ins are registered first, then any strategies found in
    custom_libraries.strategies (riskplan.yaml).

    Usage:
        registry = get_strategy_registry()
        strategy = registry.create("risk-ratio")
    """
    global _strategy_registry
    if _strategy_registry is None:
        registry = StrategyRegistry()
        registry.register_builtins()

        custom_dir = get_system_config().custom_libraries.strategies
        if custom_dir is not None:
            count = registry.discover_from_directory(Path(custom_dir))
            logger.debug("registry.custom.discovered", directory=custom_dir, count=count)

        # Published only once fully populated
        _strategy_registry = registry
    return _strategy_registry


__all__ = [
    "RegistryError",
    "ComponentNotFoundError",
    "DuplicateComponentError",
    "InvalidComponentError",
    "BaseRegistry",
    "StrategyRegistry",
    "get_strategy_registry",
]
