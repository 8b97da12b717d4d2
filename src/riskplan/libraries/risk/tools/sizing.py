"""Position sizing tools for risk management.

Pure functions for turning risk parameters into size, leverage and exit
prices. All functions are stateless and thread-safe.

Design Principles:
- Pure functions (no side effects, no global state)
- Decimal precision for financial calculations
- Sign conventions driven by Side (LONG profits up, SHORT profits down)
- Validation is a separate step (see tools/validation.py); callers
  validate first, then size

Supported Calculations:
- Risk-based size: size = (balance * risk%) / |entry - stop|
- Required leverage: ceil(notional / balance), clamped to [1, max]
- Risk-reward take-profit: entry ± |entry - stop| * rr
- PnL and distance percentages

Thread Safety:
- All functions are pure and thread-safe
- No shared mutable state
"""

import math
from decimal import Decimal

from riskplan.libraries.risk.errors import InvalidStopLossError
from riskplan.libraries.risk.models import Side

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def calculate_risk_amount(*, account_balance: Decimal, risk_percent: Decimal) -> Decimal:
    """Currency amount lost if the stop-loss is hit.

    Example:
        >>> calculate_risk_amount(account_balance=Decimal("1000"), risk_percent=Decimal("2"))
        Decimal('20')
    """
    return account_balance * risk_percent / HUNDRED


def calculate_size(
    *,
    account_balance: Decimal,
    risk_percent: Decimal,
    entry_price: Decimal,
    stop_loss: Decimal,
    side: Side,
) -> Decimal:
    """Calculate position size from the amount at risk.

    Formula:
        risk_amount = balance * risk_percent / 100
        price_risk  = entry - stop_loss   (LONG)
                      stop_loss - entry   (SHORT)
        size        = risk_amount / price_risk

    Args:
        account_balance: Account balance in quote currency
        risk_percent: Percent of balance to risk, (0, 100]
        entry_price: Entry price
        stop_loss: Stop-loss price
        side: Position side

    Returns:
        Position size in base units

    Raises:
        InvalidStopLossError: If entry equals stop_loss (zero price risk).
            Inputs are expected to have passed validate_inputs() already.

    Example:
        >>> calculate_size(
        ...     account_balance=Decimal("1000"),
        ...     risk_percent=Decimal("2"),
        ...     entry_price=Decimal("45000"),
        ...     stop_loss=Decimal("44500"),
        ...     side=Side.LONG,
        ... )
        Decimal('0.04')
    """
    risk_amount = calculate_risk_amount(account_balance=account_balance, risk_percent=risk_percent)

    if side is Side.LONG:
        price_risk = entry_price - stop_loss
    else:
        price_risk = stop_loss - entry_price

    if price_risk == 0:
        raise InvalidStopLossError(f"stop loss ({stop_loss:.4f}) equals entry ({entry_price:.4f}): price risk is zero")

    return risk_amount / price_risk


def calculate_notional(*, size: Decimal, price: Decimal) -> Decimal:
    """Total market exposure of a position."""
    return size * price


def calculate_leverage(
    *,
    size: Decimal,
    price: Decimal,
    account_balance: Decimal,
    max_leverage: int,
) -> int:
    """Calculate the leverage needed to carry a position.

    Formula:
        notional = size * price
        required = ceil(notional / balance)
        leverage = clamp(required, 1, max_leverage)

    Rounding up means the position is never under-margined. Exceeding
    max_leverage clamps instead of raising: the cap is the caller's ceiling.

    Example:
        >>> calculate_leverage(
        ...     size=Decimal("0.04"), price=Decimal("45000"), account_balance=Decimal("1000"), max_leverage=125
        ... )
        2
    """
    notional = calculate_notional(size=size, price=price)
    required = math.ceil(notional / account_balance)

    if required > max_leverage:
        return max_leverage
    if required < 1:
        return 1
    return int(required)


def calculate_rr_take_profit(
    *,
    entry_price: Decimal,
    stop_loss: Decimal,
    rr_ratio: Decimal,
    side: Side,
) -> Decimal:
    """Calculate a take-profit price from a risk-reward ratio.

    Formula:
        distance = |entry - stop_loss|
        LONG:  tp = entry + distance * rr_ratio
        SHORT: tp = entry - distance * rr_ratio

    Example:
        >>> calculate_rr_take_profit(
        ...     entry_price=Decimal("3000"), stop_loss=Decimal("3100"), rr_ratio=Decimal("2"), side=Side.SHORT
        ... )
        Decimal('2800')
    """
    distance = abs(entry_price - stop_loss)

    if side is Side.LONG:
        return entry_price + distance * rr_ratio
    return entry_price - distance * rr_ratio


def calculate_pnl_percent(*, side: Side, entry_price: Decimal, mark_price: Decimal) -> Decimal:
    """Unrealised PnL as a percentage of entry.

    Formula:
        LONG:  (mark - entry) / entry * 100
        SHORT: (entry - mark) / entry * 100

    Returns 0 when entry_price <= 0 (position not initialised yet).
    """
    if entry_price <= 0:
        return ZERO
    if side is Side.LONG:
        return (mark_price - entry_price) / entry_price * HUNDRED
    return (entry_price - mark_price) / entry_price * HUNDRED


def calculate_distance_to_price(*, side: Side, current_price: Decimal, target_price: Decimal) -> Decimal:
    """Percentage distance from current price to a target, in the profit direction of side.

    Formula:
        LONG:  (target - current) / current * 100
        SHORT: (current - target) / current * 100

    Returns 0 when current_price <= 0.
    """
    if current_price <= 0:
        return ZERO
    if side is Side.LONG:
        return (target_price - current_price) / current_price * HUNDRED
    return (current_price - target_price) / current_price * HUNDRED


def calculate_expected_pnl(
    *,
    side: Side,
    entry_price: Decimal,
    exit_price: Decimal,
    size: Decimal,
) -> tuple[Decimal, Decimal]:
    """Expected PnL of closing `size` at `exit_price`.

    Returns:
        (nominal, percent) where nominal is in quote currency and percent
        uses calculate_pnl_percent().

    Example:
        >>> calculate_expected_pnl(
        ...     side=Side.LONG, entry_price=Decimal("45000"), exit_price=Decimal("46000"), size=Decimal("0.04")
        ... )
        (Decimal('40.00'), Decimal('2.222...'))
    """
    if side is Side.LONG:
        nominal = (exit_price - entry_price) * size
    else:
        nominal = (entry_price - exit_price) * size

    percent = calculate_pnl_percent(side=side, entry_price=entry_price, mark_price=exit_price)
    return nominal, percent
