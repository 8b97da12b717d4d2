"""
Scaled Exit Strategy.

Splits the exit across several LIMIT take-profits, each placed at its own
risk-reward multiple and closing a share of the position. Shares must add
up to exactly 100%; the config is rejected at construction otherwise.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from riskplan.libraries.risk.models import PositionParams, TakeProfitLevel
from riskplan.libraries.strategies.base import RiskStrategyConfig, Strategy


class ExitTarget(BaseModel):
    """One rung of the take-profit ladder."""

    rr_ratio: Decimal = Field(..., gt=0, description="Reward multiple of the stop distance")
    percentage: Decimal = Field(..., gt=0, le=100, description="Percent of the position closed here")

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("rr_ratio", "percentage", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Any:
        if isinstance(v, float):
            return Decimal(str(v))
        return v


def _default_targets() -> tuple[ExitTarget, ...]:
    return (
        ExitTarget(rr_ratio=Decimal("1"), percentage=Decimal("50")),
        ExitTarget(rr_ratio=Decimal("2"), percentage=Decimal("30")),
        ExitTarget(rr_ratio=Decimal("3"), percentage=Decimal("20")),
    )


class ScaledExitConfig(RiskStrategyConfig):
    """
    Configuration for the scaled exit strategy.

    Example YAML:
        targets:
          - {rr_ratio: 1.0, percentage: 50}
          - {rr_ratio: 2.0, percentage: 50}
    """

    name: str = "scaled-exit"
    display_name: str = "Scaled Exit"
    description: str = "Take profit in several tranches at increasing reward multiples"

    targets: tuple[ExitTarget, ...] = Field(default_factory=_default_targets, min_length=1)

    @field_validator("targets")
    @classmethod
    def validate_targets(cls, v: tuple[ExitTarget, ...]) -> tuple[ExitTarget, ...]:
        """Targets must close exactly 100% and use distinct ratios; returned sorted by ratio."""
        total = sum((t.percentage for t in v), Decimal("0"))
        if total != Decimal("100"):
            raise ValueError(f"target percentages must sum to 100, got {total}")

        ratios = [t.rr_ratio for t in v]
        if len(set(ratios)) != len(ratios):
            raise ValueError(f"target rr_ratio values must be distinct, got {[str(r) for r in ratios]}")

        return tuple(sorted(v, key=lambda t: t.rr_ratio))


class ScaledExitStrategy(Strategy[ScaledExitConfig]):
    """Multi-level take-profit strategy."""

    config_class = ScaledExitConfig

    def description(self) -> str:
        ladder = ", ".join(f"{t.rr_ratio:.1f}R {t.percentage:.0f}%" for t in self.config.targets)
        return f"Scaled exit strategy ({ladder})"

    def build_take_profits(self, params: PositionParams, config: ScaledExitConfig) -> list[TakeProfitLevel]:
        return [self.rr_take_profit(params, target.rr_ratio, target.percentage) for target in config.targets]
