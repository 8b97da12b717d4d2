"""Root conftest for all tests - shared parameter builders and singleton isolation."""

from decimal import Decimal
from typing import Any

import pytest

import riskplan.libraries.registry as registry_module
import riskplan.system.config as config_module
from riskplan.libraries.risk.models import PositionParams, Side


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run every test from an empty directory with fresh config/registry singletons."""
    monkeypatch.delenv("RISKPLAN_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "_system_config", None)
    monkeypatch.setattr(registry_module, "_strategy_registry", None)
    yield


@pytest.fixture
def make_params():
    """Factory for PositionParams with a valid LONG BTC setup as defaults."""

    def _make(**overrides: Any) -> PositionParams:
        values: dict[str, Any] = {
            "symbol": "BTC-USDT",
            "side": Side.LONG,
            "entry_price": Decimal("45000"),
            "stop_loss": Decimal("44500"),
            "account_balance": Decimal("1000"),
            "risk_percent": Decimal("2"),
            "max_leverage": 125,
        }
        values.update(overrides)
        return PositionParams(**values)

    return _make
