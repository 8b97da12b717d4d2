"""Shared fixtures for CLI command tests."""

import pytest
from click.testing import CliRunner

from riskplan.system import LoggerFactory


@pytest.fixture
def cli_runner():
    """Fixture providing Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Commands configure logging; start and finish every test unconfigured."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


@pytest.fixture
def base_args():
    """Valid LONG BTC setup: 2% of 1000 at risk over a 500 stop distance."""
    return [
        "--symbol",
        "BTC-USDT",
        "--side",
        "long",
        "--entry",
        "45000",
        "--stop-loss",
        "44500",
        "--balance",
        "1000",
        "--risk",
        "2",
    ]
