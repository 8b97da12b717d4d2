"""Position sizing and risk calculator.

Thin configured facade over tools/sizing.py and tools/validation.py.
The only state is the default max-leverage ceiling applied when a caller
does not pass one explicitly; it is fixed at construction.

Thread Safety:
- Immutable after construction, safe for unlimited concurrent use
"""

from decimal import Decimal

from riskplan.libraries.risk.errors import InvalidInputError
from riskplan.libraries.risk.models import Side
from riskplan.libraries.risk.tools import sizing, validation

DEFAULT_MAX_LEVERAGE = 125


class Calculator:
    """
    Risk calculator bound to a default leverage ceiling.

    Example:
        >>> calc = Calculator(max_leverage=125)
        >>> calc.validate_inputs(Side.LONG, Decimal("45000"), Decimal("44500"), Decimal("2"), Decimal("1000"))
        >>> size = calc.calculate_size(Decimal("1000"), Decimal("2"), Decimal("45000"), Decimal("44500"), Side.LONG)
        >>> size
        Decimal('0.04')
        >>> calc.calculate_leverage(size, Decimal("45000"), Decimal("1000"))
        2
    """

    __slots__ = ("_max_leverage",)

    def __init__(self, max_leverage: int = DEFAULT_MAX_LEVERAGE):
        if max_leverage < 1:
            raise InvalidInputError(f"max leverage must be >= 1, got {max_leverage}")
        self._max_leverage = max_leverage

    @property
    def max_leverage(self) -> int:
        return self._max_leverage

    def __repr__(self) -> str:
        return f"Calculator(max_leverage={self._max_leverage})"

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_inputs(
        self,
        side: Side,
        entry_price: Decimal,
        stop_loss: Decimal,
        risk_percent: Decimal,
        account_balance: Decimal,
    ) -> None:
        """Single gate every strategy calls before trusting its inputs."""
        validation.validate_inputs(
            side=side,
            entry_price=entry_price,
            stop_loss=stop_loss,
            risk_percent=risk_percent,
            account_balance=account_balance,
        )

    def validate_stop_loss(self, side: Side, entry_price: Decimal, stop_loss: Decimal) -> None:
        validation.validate_stop_loss(side=side, entry_price=entry_price, stop_loss=stop_loss)

    def validate_price_logic(self, side: Side, entry_price: Decimal, current_price: Decimal) -> None:
        validation.validate_price_logic(side=side, entry_price=entry_price, current_price=current_price)

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def calculate_size(
        self,
        account_balance: Decimal,
        risk_percent: Decimal,
        entry_price: Decimal,
        stop_loss: Decimal,
        side: Side,
    ) -> Decimal:
        return sizing.calculate_size(
            account_balance=account_balance,
            risk_percent=risk_percent,
            entry_price=entry_price,
            stop_loss=stop_loss,
            side=side,
        )

    def calculate_leverage(
        self,
        size: Decimal,
        price: Decimal,
        account_balance: Decimal,
        max_leverage: int | None = None,
    ) -> int:
        """Required leverage clamped to [1, max_leverage].

        max_leverage defaults to this calculator's configured ceiling.
        """
        ceiling = self._max_leverage if max_leverage is None else max_leverage
        return sizing.calculate_leverage(
            size=size,
            price=price,
            account_balance=account_balance,
            max_leverage=ceiling,
        )

    def calculate_rr_take_profit(
        self,
        entry_price: Decimal,
        stop_loss: Decimal,
        rr_ratio: Decimal,
        side: Side,
    ) -> Decimal:
        return sizing.calculate_rr_take_profit(
            entry_price=entry_price,
            stop_loss=stop_loss,
            rr_ratio=rr_ratio,
            side=side,
        )

    def calculate_risk_amount(self, account_balance: Decimal, risk_percent: Decimal) -> Decimal:
        return sizing.calculate_risk_amount(account_balance=account_balance, risk_percent=risk_percent)

    def calculate_notional(self, size: Decimal, price: Decimal) -> Decimal:
        return sizing.calculate_notional(size=size, price=price)

    # ------------------------------------------------------------------
    # PnL / distance
    # ------------------------------------------------------------------

    def calculate_pnl_percent(self, side: Side, entry_price: Decimal, mark_price: Decimal) -> Decimal:
        return sizing.calculate_pnl_percent(side=side, entry_price=entry_price, mark_price=mark_price)

    def calculate_distance_to_price(self, side: Side, current_price: Decimal, target_price: Decimal) -> Decimal:
        return sizing.calculate_distance_to_price(side=side, current_price=current_price, target_price=target_price)

    def calculate_expected_pnl(
        self,
        side: Side,
        entry_price: Decimal,
        exit_price: Decimal,
        size: Decimal,
    ) -> tuple[Decimal, Decimal]:
        return sizing.calculate_expected_pnl(side=side, entry_price=entry_price, exit_price=exit_price, size=size)
