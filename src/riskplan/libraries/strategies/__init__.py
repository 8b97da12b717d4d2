"""
Strategy Library.

All risk strategies must inherit from Strategy and implement:
- description(): Human-readable summary of the configured policy
- build_take_profits(): The take-profit ladder for a new position

All strategy configs must inherit from RiskStrategyConfig:
- Define tunable parameters (rr ratio, risk cap, trailing callback, ...)
- Separate PROCESS (strategy code) from PARAMETERS (config values)
"""

from riskplan.libraries.strategies.base import RiskStrategyConfig, Strategy
from riskplan.libraries.strategies.buildin.conservative import ConservativeConfig, ConservativeStrategy
from riskplan.libraries.strategies.buildin.risk_ratio import RiskRatioConfig, RiskRatioStrategy
from riskplan.libraries.strategies.buildin.scaled_exit import ExitTarget, ScaledExitConfig, ScaledExitStrategy
from riskplan.libraries.strategies.buildin.trailing_stop import TrailingState, TrailingStopConfig, TrailingStopStrategy

__all__ = [
    # Base
    "Strategy",
    "RiskStrategyConfig",
    # Built-in
    "RiskRatioStrategy",
    "RiskRatioConfig",
    "ConservativeStrategy",
    "ConservativeConfig",
    "ScaledExitStrategy",
    "ScaledExitConfig",
    "ExitTarget",
    "TrailingStopStrategy",
    "TrailingStopConfig",
    "TrailingState",
]
