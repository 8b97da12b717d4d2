"""Input validation tools for risk calculations.

Pure functions that either return None or raise a typed RiskError.
Every strategy must pass its inputs through validate_inputs() before
sizing, leverage or take-profit calculations.

Thread Safety:
- All functions are pure and thread-safe
"""

from decimal import Decimal

from riskplan.libraries.risk.errors import InvalidInputError, InvalidOrderPlacementError, InvalidStopLossError
from riskplan.libraries.risk.models import Side

MAX_RISK_PERCENT = Decimal("100")


def _require_finite(**values: Decimal) -> None:
    """NaN and Infinity cannot be ordered; reject them before any comparison."""
    for name, value in values.items():
        if not Decimal(value).is_finite():
            raise InvalidInputError(f"{name.replace('_', ' ')} must be a finite number: {value}")


def validate_stop_loss(*, side: Side, entry_price: Decimal, stop_loss: Decimal) -> None:
    """Validate stop-loss placement relative to entry.

    Rules:
        LONG:  stop_loss < entry_price
        SHORT: stop_loss > entry_price

    Equality is rejected for both sides: zero price risk makes the size
    formula undefined.

    Raises:
        InvalidStopLossError: If the stop-loss is on the wrong side of entry

    Example:
        >>> validate_stop_loss(side=Side.LONG, entry_price=Decimal("45000"), stop_loss=Decimal("46000"))
        Traceback (most recent call last):
        ...
        InvalidStopLossError: LONG stop loss (46000.0000) must be below entry (45000.0000)
    """
    _require_finite(entry_price=entry_price, stop_loss=stop_loss)
    if side is Side.LONG and stop_loss >= entry_price:
        raise InvalidStopLossError(f"LONG stop loss ({stop_loss:.4f}) must be below entry ({entry_price:.4f})")
    if side is Side.SHORT and stop_loss <= entry_price:
        raise InvalidStopLossError(f"SHORT stop loss ({stop_loss:.4f}) must be above entry ({entry_price:.4f})")


def validate_price_logic(*, side: Side, entry_price: Decimal, current_price: Decimal) -> None:
    """Validate a resting limit entry against the current market price.

    A LONG limit must rest strictly below the market and a SHORT limit
    strictly above it; anything else would fill immediately as a market order.

    Raises:
        InvalidOrderPlacementError: If the order would execute immediately
        InvalidInputError: If a price is NaN or infinite
    """
    _require_finite(entry_price=entry_price, current_price=current_price)
    if side is Side.LONG and entry_price >= current_price:
        raise InvalidOrderPlacementError(
            f"LONG limit order entry ({entry_price:.4f}) must be below current price ({current_price:.4f})"
        )
    if side is Side.SHORT and entry_price <= current_price:
        raise InvalidOrderPlacementError(
            f"SHORT limit order entry ({entry_price:.4f}) must be above current price ({current_price:.4f})"
        )


def validate_inputs(
    *,
    side: Side,
    entry_price: Decimal,
    stop_loss: Decimal,
    risk_percent: Decimal,
    account_balance: Decimal,
) -> None:
    """Validate all inputs of a position calculation.

    Non-finite values (NaN, Infinity) are rejected first.

    Checks, in order:
    1. entry_price > 0
    2. stop_loss > 0
    3. 0 < risk_percent <= 100
    4. account_balance > 0
    5. stop-loss placement (see validate_stop_loss)

    Raises:
        InvalidInputError: For out-of-range numeric input
        InvalidStopLossError: For a stop-loss on the wrong side of entry
    """
    _require_finite(
        entry_price=entry_price,
        stop_loss=stop_loss,
        risk_percent=risk_percent,
        account_balance=account_balance,
    )

    if entry_price <= 0:
        raise InvalidInputError(f"entry price must be positive: {entry_price:.2f}")

    if stop_loss <= 0:
        raise InvalidInputError(f"stop loss must be positive: {stop_loss:.2f}")

    if risk_percent <= 0 or risk_percent > MAX_RISK_PERCENT:
        raise InvalidInputError(f"risk percent must be between 0 and 100: {risk_percent:.2f}")

    if account_balance <= 0:
        raise InvalidInputError(f"account balance must be positive: {account_balance:.2f}")

    validate_stop_loss(side=side, entry_price=entry_price, stop_loss=stop_loss)
