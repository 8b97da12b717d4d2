"""
Trailing Stop Strategy.

Sizes like the fixed risk-reward strategy, then trails the stop-loss behind
the best price seen once the position is far enough in profit.

Per-position tracking state is owned by the strategy instance and keyed by
symbol. One price stream per open position is assumed (single writer per
symbol); the strategy does no cross-symbol locking.

Tracking lifecycle:
    on_position_opened()  -> record created (best = entry, no trailing stop yet)
    on_price_update()     -> best price updated; once profit >= activation_percent
                             the stop follows best price at callback_rate distance
    should_close()        -> True once price crosses the trailing stop
    forget()              -> record dropped when the position is gone
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from pydantic import Field

from riskplan.libraries.risk.models import (
    ActionType,
    OrderRequest,
    OrderType,
    Position,
    PositionParams,
    Side,
    StopLossLevel,
    StopLossType,
    StrategyAction,
    TakeProfitLevel,
)
from riskplan.libraries.strategies.base import RiskStrategyConfig, Strategy

logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")


class TrailingStopConfig(RiskStrategyConfig):
    """Configuration for the trailing stop strategy."""

    name: str = "trailing-stop"
    display_name: str = "Trailing Stop"
    description: str = "Stop-loss follows the best price once the trade is in profit"

    rr_ratio: Decimal = Field(default=Decimal("3.0"), gt=0, description="Reward multiple for the far take-profit")
    activation_percent: Decimal = Field(
        default=Decimal("1.0"), ge=0, lt=100, description="Profit percent (vs entry) that arms the trailing stop"
    )
    callback_rate: Decimal = Field(
        default=Decimal("0.5"), gt=0, lt=100, description="Trailing distance from best price, in percent"
    )


@dataclass
class TrailingState:
    """Tracking record for one open position."""

    side: Side
    entry_price: Decimal
    best_price: Decimal
    stop_price: Decimal | None = None


class TrailingStopStrategy(Strategy[TrailingStopConfig]):
    """Risk-reward sizing with a trailing stop managed on price updates."""

    config_class = TrailingStopConfig

    def __init__(self, config: TrailingStopConfig | None = None):
        super().__init__(config)
        self._tracking: dict[str, TrailingState] = {}

    def description(self) -> str:
        return (
            f"Trailing stop strategy ({self.config.rr_ratio:.1f}:1 RR, "
            f"activates at {self.config.activation_percent:.2f}% profit, "
            f"trails {self.config.callback_rate:.2f}%)"
        )

    # ------------------------------------------------------------------
    # Plan
    # ------------------------------------------------------------------

    def build_stop_loss(self, params: PositionParams, config: TrailingStopConfig) -> StopLossLevel:
        if params.side is Side.LONG:
            activation = params.entry_price * (HUNDRED + config.activation_percent) / HUNDRED
        else:
            activation = params.entry_price * (HUNDRED - config.activation_percent) / HUNDRED
        return StopLossLevel(
            price=params.stop_loss,
            type=StopLossType.TRAILING,
            activation_price=activation,
            callback_rate=config.callback_rate,
        )

    def build_take_profits(self, params: PositionParams, config: TrailingStopConfig) -> list[TakeProfitLevel]:
        return [self.rr_take_profit(params, config.rr_ratio)]

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def on_position_opened(self, position: Position) -> None:
        self._tracking[position.symbol] = TrailingState(
            side=position.side,
            entry_price=position.entry_price,
            best_price=position.entry_price,
        )
        logger.debug(
            "strategy.trailing.tracking_started",
            symbol=position.symbol,
            side=position.side.value,
            entry_price=str(position.entry_price),
        )

    def on_price_update(self, position: Position, current_price: Decimal) -> StrategyAction:
        current_price = _as_decimal(current_price)
        state = self._tracking.get(position.symbol)
        if state is None or state.side is not position.side or state.entry_price != position.entry_price:
            self.on_position_opened(position)
            state = self._tracking[position.symbol]

        if state.side is Side.LONG:
            state.best_price = max(state.best_price, current_price)
        else:
            state.best_price = min(state.best_price, current_price)

        profit = self.calculator.calculate_pnl_percent(state.side, state.entry_price, state.best_price)
        if profit < self.config.activation_percent:
            return StrategyAction.none()

        candidate = self._trail_from(state.side, state.best_price)
        if not _improves(state.side, candidate, state.stop_price):
            return StrategyAction.none()

        state.stop_price = candidate
        logger.debug(
            "strategy.trailing.stop_moved",
            symbol=position.symbol,
            best_price=str(state.best_price),
            stop_price=str(candidate),
        )

        orders: tuple[OrderRequest, ...] = ()
        if position.size > 0:
            orders = (
                OrderRequest(
                    symbol=position.symbol,
                    side=state.side.opposite,
                    type=OrderType.STOP,
                    size=position.size,
                    stop_price=candidate,
                    reduce_only=True,
                ),
            )

        return StrategyAction(
            type=ActionType.ADJUST_STOP_LOSS,
            reason=f"trailing stop moved to {candidate:.4f} (best price {state.best_price:.4f})",
            orders=orders,
        )

    def should_close(self, position: Position, current_price: Decimal) -> tuple[bool, str]:
        current_price = _as_decimal(current_price)
        state = self._tracking.get(position.symbol)
        if state is None or state.stop_price is None:
            return False, ""

        if state.side is Side.LONG and current_price <= state.stop_price:
            return True, f"trailing stop hit: price {current_price:.4f} <= stop {state.stop_price:.4f}"
        if state.side is Side.SHORT and current_price >= state.stop_price:
            return True, f"trailing stop hit: price {current_price:.4f} >= stop {state.stop_price:.4f}"
        return False, ""

    def tracking(self, symbol: str) -> TrailingState | None:
        """Current tracking record for symbol, if any."""
        return self._tracking.get(symbol)

    def forget(self, symbol: str) -> None:
        """Drop tracking state once the position is closed."""
        self._tracking.pop(symbol, None)

    def _trail_from(self, side: Side, best_price: Decimal) -> Decimal:
        if side is Side.LONG:
            return best_price * (HUNDRED - self.config.callback_rate) / HUNDRED
        return best_price * (HUNDRED + self.config.callback_rate) / HUNDRED


def _improves(side: Side, candidate: Decimal, current: Decimal | None) -> bool:
    """A trailing stop only ever moves in the profit direction."""
    if current is None:
        return True
    if side is Side.LONG:
        return candidate > current
    return candidate < current


def _as_decimal(value: Decimal | float | int) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
