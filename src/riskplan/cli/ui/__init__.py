"""CLI UI components - table formatters."""

from riskplan.cli.ui.formatters import (
    create_plan_table,
    create_profiles_table,
    create_strategies_table,
    create_take_profit_table,
)

__all__ = [
    "create_plan_table",
    "create_take_profit_table",
    "create_strategies_table",
    "create_profiles_table",
]
