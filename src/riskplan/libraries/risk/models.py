"""
Risk Calculation Contract - Data Models.

This module defines the PUBLIC data shapes exchanged between callers,
the calculator and strategies. This is a CONTRACT: breaking changes
require a major version bump.

CONTRACT: riskplan v1.0.0

Input Models:
- PositionParams: Per-request sizing inputs supplied by the caller
- Position: Live position snapshot supplied by the position-tracking layer

Output Models:
- PositionPlan: Complete, immutable sizing result
- StopLossLevel / TakeProfitLevel: Exit descriptors inside a plan
- StrategyAction: Per-tick lifecycle decision
- OrderRequest: Derived order carried by a StrategyAction

Design Principles:
- Immutability: All models frozen=True (plans are snapshots)
- Decimal precision for prices, sizes and currency amounts
- Range checks on numeric inputs live in the calculator, not here, so that
  rejections surface as the typed RiskError taxonomy
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

# ============================================
# Contract Version
# ============================================

CONTRACT_VERSION = "1.0.0"

# ============================================
# Enumerations
# ============================================


class Side(str, Enum):
    """
    CONTRACT: Directional stance of a position.

    Determines sign conventions throughout the calculator:
    - LONG profits when price rises (stop-loss below entry)
    - SHORT profits when price falls (stop-loss above entry)

    Examples:
        >>> Side("LONG")
        <Side.LONG: 'LONG'>
        >>> Side("short")  # case-insensitive
        <Side.SHORT: 'SHORT'>
    """

    LONG = "LONG"
    SHORT = "SHORT"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Side"]:
        if isinstance(value, str):
            normalized = value.strip().upper()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def opposite(self) -> "Side":
        """Side used by orders that reduce a position of this side."""
        return Side.SHORT if self is Side.LONG else Side.LONG


class OrderType(str, Enum):
    """CONTRACT: Order types a plan or action may request."""

    MARKET = "MARKET"
    LIMIT = "LIMIT"
    STOP = "STOP"
    TAKE_PROFIT = "TAKE_PROFIT"
    TRAILING_STOP = "TRAILING_STOP"


class StopLossType(str, Enum):
    """CONTRACT: Stop-loss behaviour."""

    FIXED = "FIXED"
    TRAILING = "TRAILING"


class TakeProfitType(str, Enum):
    """CONTRACT: Take-profit behaviour."""

    LIMIT = "LIMIT"
    TRAILING = "TRAILING"


class ActionType(str, Enum):
    """
    CONTRACT: Action returned by Strategy.on_price_update().

    Values:
        NONE: No adjustment warranted
        ADJUST_STOP_LOSS: Move the resting stop-loss
        ADJUST_TAKE_PROFIT: Move a resting take-profit
        CLOSE: Close the position now
        ADD_POSITION: Scale into the position
    """

    NONE = "NONE"
    ADJUST_STOP_LOSS = "ADJUST_STOP_LOSS"
    ADJUST_TAKE_PROFIT = "ADJUST_TAKE_PROFIT"
    CLOSE = "CLOSE"
    ADD_POSITION = "ADD_POSITION"


def _to_decimal(value: Any) -> Any:
    """Convert floats through str() so 0.1 becomes Decimal('0.1'), not its binary expansion."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# ============================================
# Input Models
# ============================================


class PositionParams(BaseModel):
    """
    CONTRACT: Inputs for a single position calculation.

    Attributes:
        symbol: Instrument identifier (opaque to the core)
        side: LONG or SHORT
        entry_price: Intended entry price
        stop_loss: Stop-loss price
        account_balance: Account balance in quote currency
        risk_percent: Percent of balance risked on this trade, (0, 100]
        max_leverage: Highest leverage the caller permits
        strategy_params: Per-call overrides for the strategy's typed config

    Examples:
        >>> params = PositionParams(
        ...     symbol="BTC-USDT",
        ...     side=Side.LONG,
        ...     entry_price=Decimal("45000"),
        ...     stop_loss=Decimal("44500"),
        ...     account_balance=Decimal("1000"),
        ...     risk_percent=Decimal("2"),
        ...     max_leverage=125,
        ... )

    Notes:
        - Prices, balance and risk are deliberately not range-checked here;
          Calculator.validate_inputs() owns those rules.
    """

    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    side: Side = Field(..., description="Position side")
    entry_price: Decimal = Field(..., description="Entry price")
    stop_loss: Decimal = Field(..., description="Stop-loss price")
    account_balance: Decimal = Field(..., description="Account balance")
    risk_percent: Decimal = Field(..., description="Risk per trade in percent of balance")
    max_leverage: int = Field(default=125, ge=1, description="Maximum leverage permitted by the caller")
    strategy_params: dict[str, Any] = Field(default_factory=dict, description="Strategy config overrides")

    model_config = {"frozen": True}

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Ensure symbol is not empty or whitespace."""
        if not v or not v.strip():
            raise ValueError("symbol cannot be empty or whitespace")
        return v.strip()

    @field_validator("entry_price", "stop_loss", "account_balance", "risk_percent", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Any:
        return _to_decimal(v)


class Position(BaseModel):
    """
    CONTRACT: Live position snapshot from the position-tracking layer.

    The core only reads this snapshot; it never mutates it.
    """

    symbol: str = Field(..., min_length=1)
    side: Side
    size: Decimal = Field(..., ge=0)
    entry_price: Decimal = Field(..., gt=0)
    mark_price: Optional[Decimal] = None
    leverage: int = Field(default=1, ge=1)
    liquidation_price: Optional[Decimal] = None
    unrealized_pnl: Optional[Decimal] = None

    model_config = {"frozen": True}

    @field_validator("size", "entry_price", "mark_price", "liquidation_price", "unrealized_pnl", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Any:
        return _to_decimal(v)


# ============================================
# Output Models
# ============================================


class StopLossLevel(BaseModel):
    """
    CONTRACT: Stop-loss descriptor.

    activation_price and callback_rate are only meaningful for TRAILING stops.
    """

    price: Decimal = Field(..., gt=0)
    type: StopLossType = StopLossType.FIXED
    activation_price: Optional[Decimal] = None
    callback_rate: Optional[Decimal] = None

    model_config = {"frozen": True}

    @field_validator("price", "activation_price", "callback_rate", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Any:
        return _to_decimal(v)


class TakeProfitLevel(BaseModel):
    """
    CONTRACT: Take-profit descriptor.

    Attributes:
        price: Target price
        percentage: Percent of the position closed at this level, (0, 100]
        type: LIMIT or TRAILING
        activation_price: TRAILING only
        callback_rate: TRAILING only
    """

    price: Decimal = Field(..., gt=0)
    percentage: Decimal = Field(default=Decimal("100"), gt=0, le=100)
    type: TakeProfitType = TakeProfitType.LIMIT
    activation_price: Optional[Decimal] = None
    callback_rate: Optional[Decimal] = None

    model_config = {"frozen": True}

    @field_validator("price", "percentage", "activation_price", "callback_rate", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Any:
        return _to_decimal(v)


class PositionPlan(BaseModel):
    """
    CONTRACT: Result of a successful position calculation.

    Produced once per calculation and never mutated afterwards. Downstream
    consumers (order execution, reporting) treat it as a snapshot.

    Validation:
        - take_profits percentages sum to 100 when any are present
        - leverage >= 1
        - size > 0
    """

    symbol: str
    side: Side
    size: Decimal = Field(..., gt=0)
    entry_price: Decimal = Field(..., gt=0)
    leverage: int = Field(..., ge=1)
    stop_loss: StopLossLevel
    take_profits: tuple[TakeProfitLevel, ...] = ()
    risk_amount: Decimal
    risk_percent: Decimal
    notional_value: Decimal
    strategy_name: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_take_profit_split(self) -> "PositionPlan":
        """Ensure the take-profit split closes exactly the whole position."""
        if self.take_profits:
            total = sum((tp.percentage for tp in self.take_profits), Decimal("0"))
            if total != Decimal("100"):
                raise ValueError(f"take-profit percentages must sum to 100, got {total}")
        return self

    def equals_ignoring_timestamp(self, other: "PositionPlan") -> bool:
        """Compare two plans on every field except the creation timestamp."""
        return self.model_dump(exclude={"timestamp"}) == other.model_dump(exclude={"timestamp"})


class OrderRequest(BaseModel):
    """CONTRACT: Order derived by a strategy action (the core never places it)."""

    symbol: str = Field(..., min_length=1)
    side: Side
    type: OrderType
    size: Decimal = Field(..., gt=0)
    price: Optional[Decimal] = None
    stop_price: Optional[Decimal] = None
    reduce_only: bool = False

    model_config = {"frozen": True}

    @field_validator("size", "price", "stop_price", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Any:
        return _to_decimal(v)


class StrategyAction(BaseModel):
    """
    CONTRACT: Decision returned from Strategy.on_price_update().

    Ephemeral: produced per price tick, never persisted.

    Examples:
        >>> StrategyAction.none().type
        <ActionType.NONE: 'NONE'>
    """

    type: ActionType = ActionType.NONE
    reason: Optional[str] = Field(default=None, max_length=500)
    orders: tuple[OrderRequest, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def none(cls) -> "StrategyAction":
        """Action meaning "nothing to do on this tick"."""
        return cls(type=ActionType.NONE)


# ============================================
# Public API
# ============================================

__all__ = [
    "CONTRACT_VERSION",
    "Side",
    "OrderType",
    "StopLossType",
    "TakeProfitType",
    "ActionType",
    "PositionParams",
    "Position",
    "StopLossLevel",
    "TakeProfitLevel",
    "PositionPlan",
    "OrderRequest",
    "StrategyAction",
]
