"""Unit tests for risk validation tools.

Coverage focus:
- validate_stop_loss: Side/entry relationship, equality rejected
- validate_price_logic: Limit orders that would fill immediately
- validate_inputs: Range checks and their order
"""

from decimal import Decimal

import pytest

from riskplan.libraries.risk.calculator import Calculator
from riskplan.libraries.risk.errors import (
    InvalidInputError,
    InvalidOrderPlacementError,
    InvalidStopLossError,
    RiskError,
)
from riskplan.libraries.risk.models import Side
from riskplan.libraries.risk.tools.validation import validate_inputs, validate_price_logic, validate_stop_loss


def _inputs(**overrides):
    values = {
        "side": Side.LONG,
        "entry_price": Decimal("45000"),
        "stop_loss": Decimal("44500"),
        "risk_percent": Decimal("2"),
        "account_balance": Decimal("1000"),
    }
    values.update(overrides)
    return values


class TestValidateStopLoss:
    """Test suite for validate_stop_loss function."""

    def test_long_stop_below_entry_passes(self):
        validate_stop_loss(side=Side.LONG, entry_price=Decimal("45000"), stop_loss=Decimal("44500"))

    def test_short_stop_above_entry_passes(self):
        validate_stop_loss(side=Side.SHORT, entry_price=Decimal("3000"), stop_loss=Decimal("3100"))

    def test_long_stop_above_entry_rejected(self):
        with pytest.raises(InvalidStopLossError, match=r"LONG stop loss \(46000\.0000\) must be below entry"):
            validate_stop_loss(side=Side.LONG, entry_price=Decimal("45000"), stop_loss=Decimal("46000"))

    def test_short_stop_below_entry_rejected(self):
        with pytest.raises(InvalidStopLossError, match=r"SHORT stop loss \(2900\.0000\) must be above entry"):
            validate_stop_loss(side=Side.SHORT, entry_price=Decimal("3000"), stop_loss=Decimal("2900"))

    @pytest.mark.parametrize("side", [Side.LONG, Side.SHORT])
    def test_stop_equal_to_entry_rejected(self, side):
        """Test zero price risk is invalid for both sides."""
        with pytest.raises(InvalidStopLossError):
            validate_stop_loss(side=side, entry_price=Decimal("45000"), stop_loss=Decimal("45000"))

    def test_nan_stop_rejected(self):
        with pytest.raises(InvalidInputError, match="stop loss must be a finite number"):
            validate_stop_loss(side=Side.LONG, entry_price=Decimal("45000"), stop_loss=Decimal("NaN"))


class TestValidatePriceLogic:
    """Test suite for validate_price_logic function."""

    def test_long_limit_below_market_passes(self):
        validate_price_logic(side=Side.LONG, entry_price=Decimal("44000"), current_price=Decimal("45000"))

    def test_short_limit_above_market_passes(self):
        validate_price_logic(side=Side.SHORT, entry_price=Decimal("46000"), current_price=Decimal("45000"))

    def test_long_limit_at_market_rejected(self):
        with pytest.raises(InvalidOrderPlacementError, match="must be below current price"):
            validate_price_logic(side=Side.LONG, entry_price=Decimal("45000"), current_price=Decimal("45000"))

    def test_short_limit_below_market_rejected(self):
        with pytest.raises(InvalidOrderPlacementError, match="must be above current price"):
            validate_price_logic(side=Side.SHORT, entry_price=Decimal("44000"), current_price=Decimal("45000"))

    def test_infinite_current_price_rejected(self):
        with pytest.raises(InvalidInputError, match="current price must be a finite number"):
            validate_price_logic(side=Side.LONG, entry_price=Decimal("44000"), current_price=Decimal("Infinity"))


class TestValidateInputs:
    """Test suite for validate_inputs function."""

    def test_valid_inputs_pass(self):
        # Act & Assert - no exception
        validate_inputs(**_inputs())

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"entry_price": Decimal("-45000")}, "entry price must be positive"),
            ({"entry_price": Decimal("0")}, "entry price must be positive"),
            ({"stop_loss": Decimal("0")}, "stop loss must be positive"),
            ({"risk_percent": Decimal("0")}, "risk percent must be between 0 and 100"),
            ({"risk_percent": Decimal("150")}, "risk percent must be between 0 and 100"),
            ({"account_balance": Decimal("0")}, "account balance must be positive"),
        ],
    )
    def test_out_of_range_rejected(self, overrides, message):
        with pytest.raises(InvalidInputError, match=message):
            validate_inputs(**_inputs(**overrides))

    @pytest.mark.parametrize("field", ["entry_price", "stop_loss", "risk_percent", "account_balance"])
    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")])
    def test_non_finite_rejected(self, field, value):
        with pytest.raises(InvalidInputError, match="must be a finite number"):
            validate_inputs(**_inputs(**{field: value}))

    def test_non_finite_rejected_through_calculator(self):
        with pytest.raises(RiskError, match="entry price must be a finite number"):
            Calculator().validate_inputs(Side.LONG, Decimal("NaN"), Decimal("1"), Decimal("2"), Decimal("1000"))

    def test_full_risk_allowed(self):
        """Test 100% is the inclusive upper bound."""
        validate_inputs(**_inputs(risk_percent=Decimal("100")))

    def test_numeric_checks_run_before_stop_loss_relation(self):
        """Test a bad entry is reported even when the stop is also misplaced."""
        with pytest.raises(InvalidInputError, match="entry price"):
            validate_inputs(**_inputs(entry_price=Decimal("-1"), stop_loss=Decimal("44500")))

    def test_stop_loss_relation_checked_last(self):
        with pytest.raises(InvalidStopLossError):
            validate_inputs(**_inputs(stop_loss=Decimal("46000")))

    def test_all_errors_are_risk_errors(self):
        """Test callers can catch a single base class."""
        with pytest.raises(RiskError):
            validate_inputs(**_inputs(account_balance=Decimal("-5")))
        with pytest.raises(ValueError):
            validate_inputs(**_inputs(stop_loss=Decimal("46000")))
