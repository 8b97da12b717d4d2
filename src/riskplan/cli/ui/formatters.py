"""Rich table formatters for CLI output."""

from decimal import Decimal

from rich.table import Table

from riskplan.libraries.risk.models import PositionPlan, StopLossType


def _amount(value: Decimal) -> str:
    """Plain notation without trailing zeros (0.0400 -> 0.04)."""
    text = f"{value.normalize():f}"
    return text if text != "-0" else "0"


def create_plan_table(plan: PositionPlan) -> Table:
    """
    Create a Rich table summarising a position plan.

    Args:
        plan: Plan returned by Strategy.calculate_position()

    Returns:
        Two-column Field/Value table
    """
    table = Table(title=f"Position Plan - {plan.symbol} ({plan.strategy_name})")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    side_style = "green" if plan.side.value == "LONG" else "red"
    table.add_row("Side", f"[{side_style}]{plan.side.value}[/{side_style}]")
    table.add_row("Size", _amount(plan.size))
    table.add_row("Entry", f"{plan.entry_price:.4f}")
    table.add_row("Leverage", f"{plan.leverage}x")
    table.add_row("Notional", f"{plan.notional_value:,.2f}")
    table.add_row("Risk", f"{plan.risk_amount:,.2f} ({_amount(plan.risk_percent)}%)", style="yellow")

    stop = plan.stop_loss
    table.add_row("Stop Loss", f"{stop.price:.4f} ({stop.type.value})")
    if stop.type is StopLossType.TRAILING:
        table.add_row("  Activation", f"{stop.activation_price:.4f}" if stop.activation_price is not None else "-")
        table.add_row("  Callback", f"{_amount(stop.callback_rate)}%" if stop.callback_rate is not None else "-")

    return table


def create_take_profit_table(plan: PositionPlan) -> Table:
    """
    Create a Rich table listing the take-profit ladder.

    Returns:
        Configured Rich Table with one row per level
    """
    table = Table(title="Take Profits")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Close %", style="magenta", justify="right")
    table.add_column("Type", style="white")

    for idx, level in enumerate(plan.take_profits, start=1):
        table.add_row(str(idx), f"{level.price:.4f}", _amount(level.percentage), level.type.value)

    return table


def create_strategies_table() -> Table:
    """
    Create a Rich table for the strategy listing.

    Returns:
        Configured Rich Table with columns (rows added by caller)
    """
    table = Table(title="Risk Strategies")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display Name", style="white")
    table.add_column("Source", style="dim")
    table.add_column("Description", style="white")
    return table


def create_profiles_table() -> Table:
    """Create a Rich table for the profile listing (rows added by caller)."""
    table = Table(title="Risk Profiles")
    table.add_column("Profile", style="cyan", no_wrap=True)
    table.add_column("Source", style="dim")
    table.add_column("Strategy", style="white")
    return table
