"""Unit tests for CLI UI formatters.

Tests the Rich table formatters for position plans and listings.
"""

from decimal import Decimal

import pytest
from rich.console import Console
from rich.table import Table

from riskplan.cli.ui.formatters import (
    _amount,
    create_plan_table,
    create_profiles_table,
    create_strategies_table,
    create_take_profit_table,
)
from riskplan.libraries.strategies import RiskRatioStrategy, ScaledExitStrategy, TrailingStopStrategy


def render(table: Table) -> str:
    console = Console(width=120, record=True)
    console.print(table)
    return console.export_text()


class TestAmount:
    """Test plain-number formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("0.0400"), "0.04"),
            (Decimal("100"), "100"),
            (Decimal("1E+2"), "100"),
            (Decimal("-0.00"), "0"),
        ],
    )
    def test_amount(self, value, expected):
        assert _amount(value) == expected


class TestPlanTable:
    """Test position plan table creation."""

    def test_create_plan_table(self, make_params):
        plan = RiskRatioStrategy().calculate_position(make_params())

        table = create_plan_table(plan)

        assert isinstance(table, Table)
        assert table.title == "Position Plan - BTC-USDT (risk-ratio)"
        assert len(table.columns) == 2

    def test_plan_table_rows(self, make_params):
        plan = RiskRatioStrategy().calculate_position(make_params())

        text = render(create_plan_table(plan))

        assert "LONG" in text
        assert "0.04" in text
        assert "45000.0000" in text
        assert "2x" in text
        assert "1,800.00" in text
        assert "20.00 (2%)" in text
        assert "44500.0000 (FIXED)" in text
        assert "Activation" not in text

    def test_trailing_stop_rows(self, make_params):
        plan = TrailingStopStrategy().calculate_position(make_params())

        text = render(create_plan_table(plan))

        assert "(TRAILING)" in text
        assert "45450.0000" in text
        assert "0.5%" in text


class TestTakeProfitTable:
    """Test take-profit ladder table."""

    def test_one_row_per_level(self, make_params):
        plan = ScaledExitStrategy().calculate_position(make_params())

        table = create_take_profit_table(plan)

        assert table.title == "Take Profits"
        assert table.row_count == 3

    def test_rows_content(self, make_params):
        plan = ScaledExitStrategy().calculate_position(make_params())

        text = render(create_take_profit_table(plan))

        assert "45500.0000" in text
        assert "46500.0000" in text
        assert "LIMIT" in text


class TestListingTables:
    """Test empty listing tables (rows added by commands)."""

    def test_strategies_table_columns(self):
        table = create_strategies_table()

        assert [c.header for c in table.columns] == ["Name", "Display Name", "Source", "Description"]
        assert table.row_count == 0

    def test_profiles_table_columns(self):
        table = create_profiles_table()

        assert [c.header for c in table.columns] == ["Profile", "Source", "Strategy"]
