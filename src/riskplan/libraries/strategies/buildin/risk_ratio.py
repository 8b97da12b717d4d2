"""
Fixed Risk-Reward Strategy.

The reference strategy: one FIXED stop-loss at the requested price and a
single LIMIT take-profit closing 100% of the position at rr_ratio times the
stop distance.

Lifecycle hooks are inherited no-ops: once the TP/SL orders rest on the
exchange, they handle the exit.
"""

from decimal import Decimal

from pydantic import Field

from riskplan.libraries.risk.models import PositionParams, TakeProfitLevel
from riskplan.libraries.strategies.base import RiskStrategyConfig, Strategy


class RiskRatioConfig(RiskStrategyConfig):
    """Configuration for the fixed risk-reward strategy."""

    name: str = "risk-ratio"
    display_name: str = "Fixed Risk-Reward"
    description: str = "Single take-profit at a fixed multiple of the stop distance"

    rr_ratio: Decimal = Field(default=Decimal("2.0"), gt=0, description="Reward multiple of the stop distance")


class RiskRatioStrategy(Strategy[RiskRatioConfig]):
    """
    Fixed risk-reward ratio strategy.

    Example:
        >>> strategy = RiskRatioStrategy(RiskRatioConfig(rr_ratio=Decimal("2.0")))
        >>> strategy.description()
        'Fixed risk-reward ratio strategy (2.0:1)'
    """

    config_class = RiskRatioConfig

    def description(self) -> str:
        return f"Fixed risk-reward ratio strategy ({self.config.rr_ratio:.1f}:1)"

    def build_take_profits(self, params: PositionParams, config: RiskRatioConfig) -> list[TakeProfitLevel]:
        return [self.rr_take_profit(params, config.rr_ratio)]
