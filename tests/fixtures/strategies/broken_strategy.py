"""
Broken strategy - for testing error handling.

This file has import errors and should be skipped gracefully.
"""

# mypy: ignore-errors

# This import will fail
from nonexistent_module import something_broken  # pyright: ignore[reportMissingImports]  # noqa: F401

from riskplan.libraries.strategies import RiskStrategyConfig, Strategy


class BrokenConfig(RiskStrategyConfig):
    name: str = "broken"
    display_name: str = "Broken"


class BrokenStrategy(Strategy[BrokenConfig]):
    config_class = BrokenConfig

    def description(self) -> str:
        return "never loaded"

    def build_take_profits(self, params, config):
        return []
