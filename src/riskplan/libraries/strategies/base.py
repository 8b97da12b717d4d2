"""
Base Strategy Abstract Class.

All risk strategies inherit from Strategy and declare a RiskStrategyConfig
subclass holding their parameters. The registry looks strategies up by
config name, so callers select a policy by name instead of by type.

Philosophy:
- Strategies define PROCESS (how exits and caps are derived)
- Configs define PARAMETERS (rr ratio, risk cap, trailing callback, ...)
- Every strategy sizes through the same Calculator primitives
- Strategies never place orders; they return plans and actions

Registry Name: Defined in config.name field (e.g., "risk-ratio", "conservative")
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, ClassVar, Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from riskplan.libraries.risk.calculator import DEFAULT_MAX_LEVERAGE, Calculator
from riskplan.libraries.risk.errors import RiskError, ValidationFailedError
from riskplan.libraries.risk.models import (
    Position,
    PositionParams,
    PositionPlan,
    StopLossLevel,
    StopLossType,
    StrategyAction,
    TakeProfitLevel,
    TakeProfitType,
)

logger = structlog.get_logger(__name__)

TConfig = TypeVar("TConfig", bound="RiskStrategyConfig")


class RiskStrategyConfig(BaseModel):
    """
    Base configuration class for all risk strategies.

    Configs are immutable and reject unknown fields, so a typo in a YAML
    profile or in PositionParams.strategy_params fails loudly.

    Required Fields:
    - name: Registry identifier (e.g., "risk-ratio")
    - display_name: Human-readable name (e.g., "Fixed Risk-Reward")

    Example:
        ```python
        class RiskRatioConfig(RiskStrategyConfig):
            name: str = "risk-ratio"
            display_name: str = "Fixed Risk-Reward"
            rr_ratio: Decimal = Field(default=Decimal("2.0"), gt=0)
        ```
    """

    name: str = Field(..., min_length=1, description="Strategy identifier for registry (e.g., 'risk-ratio')")
    display_name: str = Field(..., description="Human-readable name for display")
    description: str = Field(default="", description="Free-form notes about the strategy")
    max_leverage: int = Field(
        default=DEFAULT_MAX_LEVERAGE,
        ge=1,
        description="Strategy leverage ceiling; narrows, never widens, the caller's max_leverage",
    )

    # Limits that per-call overrides may lower but never raise
    ceiling_fields: ClassVar[tuple[str, ...]] = ("max_leverage",)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def coerce_floats(cls, data: Any) -> Any:
        """Floats go through str() so a YAML 1.5 becomes Decimal('1.5') in Decimal fields."""
        if isinstance(data, dict):
            return {k: Decimal(str(v)) if isinstance(v, float) else v for k, v in data.items()}
        return data


class Strategy(ABC, Generic[TConfig]):
    """
    Abstract base class for all risk strategies.

    Type Parameters:
        TConfig: The RiskStrategyConfig subclass used by this strategy.

    Responsibilities:
    - Validate inputs through the Calculator before any sizing
    - Derive size, leverage and exit levels into a PositionPlan
    - React to lifecycle callbacks of the live position (optional)

    Does NOT:
    - Place or cancel orders
    - Persist positions
    - Fetch prices

    calculate_position() is a template method. Subclasses customise it via:
    - effective_risk_percent(): cap the requested risk
    - build_stop_loss(): stop-loss descriptor (default FIXED at params.stop_loss)
    - build_take_profits(): take-profit ladder (abstract)

    Lifecycle defaults are no-ops: once TP/SL orders rest on the exchange,
    a stateless strategy has nothing left to do.
    """

    config_class: ClassVar[type[RiskStrategyConfig]]
    config: TConfig

    def __init__(self, config: TConfig | None = None):
        if config is None:
            config = self.config_class()  # type: ignore[assignment,call-arg]
        self.config = config  # type: ignore[assignment]
        self.calculator = Calculator(max_leverage=config.max_leverage)  # type: ignore[union-attr]

    @property
    def name(self) -> str:
        """Stable strategy identifier (config.name)."""
        return self.config.name

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @abstractmethod
    def description(self) -> str:
        """Human-readable summary, may embed configured parameters."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def validate_params(self, strategy_params: Mapping[str, Any] | None = None) -> TConfig:
        """
        Validate per-call overrides against this strategy's config.

        Args:
            strategy_params: Field overrides (e.g., {"rr_ratio": 3})

        Returns:
            The effective config (self.config when there are no overrides)

        Raises:
            ValidationFailedError: Unknown field, invalid value, or an override above a ceiling field
        """
        if not strategy_params:
            return self.config

        if "name" in strategy_params and strategy_params["name"] != self.config.name:
            raise ValidationFailedError(f"strategy '{self.name}' cannot be renamed per call")

        try:
            config = type(self.config).model_validate({**self.config.model_dump(), **dict(strategy_params)})
        except ValidationError as e:
            raise ValidationFailedError(f"invalid parameters for strategy '{self.name}'", cause=e) from e

        for field in self.config.ceiling_fields:
            requested, ceiling = getattr(config, field), getattr(self.config, field)
            if requested > ceiling:
                raise ValidationFailedError(
                    f"strategy '{self.name}' caps {field} at {ceiling}; per-call override {requested} not allowed"
                )
        return config

    # ------------------------------------------------------------------
    # Position calculation
    # ------------------------------------------------------------------

    def calculate_position(self, params: PositionParams) -> PositionPlan:
        """
        Calculate size, leverage and exits for a new position.

        Flow:
            1. Resolve effective config (validate_params)
            2. Validate inputs via Calculator (errors wrapped in ValidationFailedError)
            3. Apply strategy risk cap (effective_risk_percent)
            4. Size from the amount at risk
            5. Leverage, capped at min(params.max_leverage, config.max_leverage)
            6. Exit levels (build_stop_loss / build_take_profits)
            7. Assemble the immutable plan

        Raises:
            ValidationFailedError: Inputs or overrides rejected. No plan is produced.
        """
        config = self.validate_params(params.strategy_params)

        try:
            self.calculator.validate_inputs(
                params.side,
                params.entry_price,
                params.stop_loss,
                params.risk_percent,
                params.account_balance,
            )
        except RiskError as e:
            logger.warning(
                "strategy.position.rejected",
                strategy=self.name,
                symbol=params.symbol,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ValidationFailedError("validation failed", cause=e) from e

        risk_percent = self.effective_risk_percent(params, config)

        size = self.calculator.calculate_size(
            params.account_balance,
            risk_percent,
            params.entry_price,
            params.stop_loss,
            params.side,
        )

        max_leverage = min(params.max_leverage, config.max_leverage)
        leverage = self.calculator.calculate_leverage(size, params.entry_price, params.account_balance, max_leverage)

        plan = PositionPlan(
            symbol=params.symbol,
            side=params.side,
            size=size,
            entry_price=params.entry_price,
            leverage=leverage,
            stop_loss=self.build_stop_loss(params, config),
            take_profits=tuple(self.build_take_profits(params, config)),
            risk_amount=self.calculator.calculate_risk_amount(params.account_balance, risk_percent),
            risk_percent=risk_percent,
            notional_value=self.calculator.calculate_notional(size, params.entry_price),
            strategy_name=self.name,
            timestamp=datetime.now(timezone.utc),
        )

        logger.debug(
            "strategy.position.calculated",
            strategy=self.name,
            symbol=plan.symbol,
            side=plan.side.value,
            size=str(plan.size),
            leverage=plan.leverage,
            risk_amount=str(plan.risk_amount),
        )
        return plan

    def effective_risk_percent(self, params: PositionParams, config: TConfig) -> Decimal:
        """Risk percent actually used for sizing (default: as requested)."""
        return params.risk_percent

    def build_stop_loss(self, params: PositionParams, config: TConfig) -> StopLossLevel:
        """Stop-loss descriptor (default: FIXED at the requested stop)."""
        return StopLossLevel(price=params.stop_loss, type=StopLossType.FIXED)

    @abstractmethod
    def build_take_profits(self, params: PositionParams, config: TConfig) -> list[TakeProfitLevel]:
        """Ordered take-profit ladder; percentages must sum to 100."""

    def rr_take_profit(
        self,
        params: PositionParams,
        rr_ratio: Decimal,
        percentage: Decimal = Decimal("100"),
    ) -> TakeProfitLevel:
        """
        LIMIT take-profit placed rr_ratio stop-distances from entry.

        Raises:
            ValidationFailedError: Target would be at or below zero (SHORT with a wide stop)
        """
        price = self.calculator.calculate_rr_take_profit(params.entry_price, params.stop_loss, rr_ratio, params.side)
        if price <= 0:
            raise ValidationFailedError(
                f"take-profit at {rr_ratio}R is not a valid price ({price:.4f}) for entry {params.entry_price:.4f}"
            )
        return TakeProfitLevel(price=price, percentage=percentage, type=TakeProfitType.LIMIT)

    # ------------------------------------------------------------------
    # Lifecycle callbacks
    # ------------------------------------------------------------------

    def on_position_opened(self, position: Position) -> None:
        """Called once when a plan becomes a live position."""
        return None

    def on_price_update(self, position: Position, current_price: Decimal) -> StrategyAction:
        """Called on every price tick; must return promptly."""
        return StrategyAction.none()

    def should_close(self, position: Position, current_price: Decimal) -> tuple[bool, str]:
        """Independent close decision, orthogonal to resting TP/SL orders."""
        return False, ""


# ============================================================================
# Public API
# ============================================================================

__all__ = [
    "RiskStrategyConfig",
    "Strategy",
]
