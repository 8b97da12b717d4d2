"""
Risk Calculation Library.

Pure function-based tools for position sizing and input validation, wrapped
by a Calculator that carries the leverage ceiling.

Architecture:
- tools/sizing.py: Size, leverage, take-profit and PnL arithmetic
- tools/validation.py: Input and price-relationship checks
- calculator.py: Calculator facade over the tools
- models.py: Position parameters, plans and lifecycle actions
- errors.py: Typed rejection errors
- loaders.py: Risk profile loading from YAML

Usage:
    >>> from riskplan.libraries.risk import Calculator, Side
    >>>
    >>> calc = Calculator(max_leverage=20)
    >>> calc.validate_inputs(Side.LONG, Decimal("45000"), Decimal("44000"), Decimal("2"), Decimal("1000"))
    >>> calc.calculate_size(Decimal("1000"), Decimal("2"), Decimal("45000"), Decimal("44000"), Side.LONG)
    Decimal('0.02')
"""

from riskplan.libraries.risk.calculator import DEFAULT_MAX_LEVERAGE, Calculator
from riskplan.libraries.risk.errors import (
    InvalidInputError,
    InvalidOrderPlacementError,
    InvalidStopLossError,
    RiskError,
    ValidationFailedError,
)
from riskplan.libraries.risk.models import (
    ActionType,
    OrderRequest,
    OrderType,
    Position,
    PositionParams,
    PositionPlan,
    Side,
    StopLossLevel,
    StopLossType,
    StrategyAction,
    TakeProfitLevel,
    TakeProfitType,
)

__all__ = [
    # Calculator
    "Calculator",
    "DEFAULT_MAX_LEVERAGE",
    # Errors
    "RiskError",
    "InvalidInputError",
    "InvalidStopLossError",
    "InvalidOrderPlacementError",
    "ValidationFailedError",
    # Models
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
