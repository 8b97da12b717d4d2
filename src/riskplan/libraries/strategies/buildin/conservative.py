"""
Conservative Strategy.

Fixed risk-reward exits with hard ceilings on risk and leverage. A request
above the ceiling is clamped rather than rejected; the plan reports the
clamped values so callers can see what was actually applied.
"""

from decimal import Decimal
from typing import ClassVar

import structlog
from pydantic import Field

from riskplan.libraries.risk.models import PositionParams, TakeProfitLevel
from riskplan.libraries.strategies.base import RiskStrategyConfig, Strategy

logger = structlog.get_logger(__name__)


class ConservativeConfig(RiskStrategyConfig):
    """Configuration for the conservative strategy."""

    name: str = "conservative"
    display_name: str = "Conservative"
    description: str = "Capped risk and leverage with a modest reward target"

    rr_ratio: Decimal = Field(default=Decimal("1.5"), gt=0)
    max_risk_percent: Decimal = Field(default=Decimal("1.0"), gt=0, le=100)
    max_leverage: int = Field(default=10, ge=1)

    ceiling_fields: ClassVar[tuple[str, ...]] = ("max_leverage", "max_risk_percent")


class ConservativeStrategy(Strategy[ConservativeConfig]):
    """
    Conservative risk management.

    - Risk per trade capped at max_risk_percent
    - Leverage capped at max_leverage
    - Single take-profit at rr_ratio
    """

    config_class = ConservativeConfig

    def description(self) -> str:
        return (
            f"Conservative strategy ({self.config.rr_ratio:.1f}:1 RR, "
            f"max {self.config.max_risk_percent:.1f}% risk, max {self.config.max_leverage}x leverage)"
        )

    def effective_risk_percent(self, params: PositionParams, config: ConservativeConfig) -> Decimal:
        if params.risk_percent > config.max_risk_percent:
            logger.warning(
                "strategy.risk.capped",
                strategy=self.name,
                symbol=params.symbol,
                requested=str(params.risk_percent),
                applied=str(config.max_risk_percent),
            )
            return config.max_risk_percent
        return params.risk_percent

    def build_take_profits(self, params: PositionParams, config: ConservativeConfig) -> list[TakeProfitLevel]:
        return [self.rr_take_profit(params, config.rr_ratio)]
