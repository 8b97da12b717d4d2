"""Position plan calculation command."""

import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Optional, cast

import click
import yaml
from rich.console import Console
from rich.markup import escape

from riskplan.cli.ui.formatters import create_plan_table, create_take_profit_table
from riskplan.libraries.registry import RegistryError, get_strategy_registry
from riskplan.libraries.risk.loaders import load_profile
from riskplan.libraries.risk.models import PositionParams, Side
from riskplan.system import LoggerFactory
from riskplan.system.config import reload_system_config

console = Console()


class DecimalParamType(click.ParamType):
    """Click parameter parsed straight into a finite Decimal."""

    name = "decimal"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if not result.is_finite():
            self.fail(f"{value!r} is not a finite number", param, ctx)
        return result


DECIMAL = DecimalParamType()


def _parse_strategy_params(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Turn ("rr_ratio=3", ...) into {"rr_ratio": 3, ...}; values are YAML scalars."""
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--param")
        params[key.strip()] = yaml.safe_load(raw)
    return params


@click.command("calculate")
@click.option("--symbol", required=True, help="Instrument symbol (e.g. BTC-USDT)")
@click.option(
    "--side",
    type=click.Choice(["long", "short"], case_sensitive=False),
    required=True,
    help="Position side",
)
@click.option("--entry", "entry_price", type=DECIMAL, required=True, help="Entry price")
@click.option("--stop-loss", "stop_loss", type=DECIMAL, required=True, help="Stop-loss price")
@click.option("--balance", "account_balance", type=DECIMAL, required=True, help="Account balance")
@click.option("--risk", "risk_percent", type=DECIMAL, required=True, help="Risk per trade, percent of balance")
@click.option(
    "--max-leverage",
    type=click.IntRange(min=1),
    help="Maximum leverage (default: calculator.default_max_leverage from riskplan.yaml)",
)
@click.option("--strategy", "-s", "strategy_name", help="Registered strategy name (default: risk-ratio)")
@click.option("--profile", "-p", "profile_name", help="Risk profile name (built-in or custom)")
@click.option(
    "--param",
    "params",
    multiple=True,
    metavar="KEY=VALUE",
    help="Per-call strategy parameter override (repeatable)",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level (DEBUG shows every calculation step)",
)
def calculate_command(
    symbol: str,
    side: str,
    entry_price: Decimal,
    stop_loss: Decimal,
    account_balance: Decimal,
    risk_percent: Decimal,
    max_leverage: Optional[int],
    strategy_name: Optional[str],
    profile_name: Optional[str],
    params: tuple[str, ...],
    log_level: Optional[str],
):
    """
    Calculate a position plan: size, leverage, stop-loss and take-profits.

    \b
    Examples:
        # 2% risk, default fixed 2:1 risk-reward
        riskplan calculate --symbol BTC-USDT --side long \\
            --entry 45000 --stop-loss 44500 --balance 1000 --risk 2

        # Capped risk and leverage
        riskplan calculate ... --strategy conservative

        # Built-in or custom YAML profile
        riskplan calculate ... --profile scaled

        # Override a strategy parameter for this call only
        riskplan calculate ... --param rr_ratio=3
    """
    if strategy_name and profile_name:
        raise click.UsageError("--strategy and --profile are mutually exclusive")

    system_config = reload_system_config()
    if log_level:
        level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level.upper())
        system_config.logging.level = level
    LoggerFactory.configure(system_config.logging.to_logger_config())

    strategy_params = _parse_strategy_params(params)

    try:
        if profile_name:
            strategy = load_profile(profile_name)
        else:
            strategy = get_strategy_registry().create(strategy_name or "risk-ratio")

        position_params = PositionParams(
            symbol=symbol,
            side=Side(side),
            entry_price=entry_price,
            stop_loss=stop_loss,
            account_balance=account_balance,
            risk_percent=risk_percent,
            max_leverage=max_leverage or system_config.calculator.default_max_leverage,
            strategy_params=strategy_params,
        )
        plan = strategy.calculate_position(position_params)

    except (RegistryError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]✗ Calculation failed:[/bold red] {escape(str(e))}")
        sys.exit(1)

    console.rule(f"[bold blue]{strategy.description()}[/bold blue]")
    console.print(create_plan_table(plan))
    console.print(create_take_profit_table(plan))
