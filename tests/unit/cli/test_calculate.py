"""
Unit tests for riskplan.cli.commands.calculate module.

Tests cover:
- Plan output for the default strategy, named strategies and profiles
- Per-call --param overrides
- Rejected inputs (exit code 1) vs usage errors (exit code 2)
- --max-leverage default taken from riskplan.yaml
"""

import click
import pytest

from riskplan.cli.commands.calculate import DECIMAL, _parse_strategy_params, calculate_command


class TestCalculateCommand:
    """Test the calculate command end to end."""

    def test_default_strategy_prints_plan(self, cli_runner, base_args):
        # Act
        result = cli_runner.invoke(calculate_command, base_args)

        # Assert
        assert result.exit_code == 0, result.output
        assert "Position Plan - BTC-USDT (risk-ratio)" in result.output
        assert "0.04" in result.output
        assert "2x" in result.output
        assert "44500.0000" in result.output
        assert "46000.0000" in result.output

    def test_short_side(self, cli_runner):
        args = [
            "--symbol",
            "ETH-USDT",
            "--side",
            "SHORT",
            "--entry",
            "3000",
            "--stop-loss",
            "3030",
            "--balance",
            "1000",
            "--risk",
            "1",
        ]

        result = cli_runner.invoke(calculate_command, args)

        assert result.exit_code == 0, result.output
        assert "SHORT" in result.output
        assert "2940.0000" in result.output

    def test_named_strategy(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--strategy", "conservative"])

        assert result.exit_code == 0, result.output
        assert "(conservative)" in result.output
        # 2% request clamped to 1%: half the size, 1.5R target
        assert "0.02" in result.output
        assert "45750.0000" in result.output

    def test_profile(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--profile", "scaled"])

        assert result.exit_code == 0, result.output
        assert "(scaled-exit)" in result.output
        for price in ("45500.0000", "46000.0000", "46500.0000"):
            assert price in result.output

    def test_trailing_profile_shows_activation(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "-p", "trailing"])

        assert result.exit_code == 0, result.output
        assert "TRAILING" in result.output
        assert "45450.0000" in result.output
        assert "46500.0000" in result.output

    def test_param_override(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--param", "rr_ratio=3"])

        assert result.exit_code == 0, result.output
        assert "46500.0000" in result.output

    def test_max_leverage_option_caps_leverage(self, cli_runner):
        args = [
            "--symbol",
            "BTC-USDT",
            "--side",
            "long",
            "--entry",
            "45000",
            "--stop-loss",
            "44955",
            "--balance",
            "1000",
            "--risk",
            "1",
            "--max-leverage",
            "5",
        ]

        result = cli_runner.invoke(calculate_command, args)

        assert result.exit_code == 0, result.output
        assert "5x" in result.output

    def test_max_leverage_default_from_system_config(self, cli_runner, tmp_path):
        # cwd is tmp_path, so this file is picked up as ./riskplan.yaml
        (tmp_path / "riskplan.yaml").write_text("calculator:\n  default_max_leverage: 3\n")
        args = [
            "--symbol",
            "BTC-USDT",
            "--side",
            "long",
            "--entry",
            "45000",
            "--stop-loss",
            "44955",
            "--balance",
            "1000",
            "--risk",
            "1",
        ]

        result = cli_runner.invoke(calculate_command, args)

        assert result.exit_code == 0, result.output
        assert "3x" in result.output


class TestCalculateErrors:
    """Test error handling of the calculate command."""

    def test_stop_on_wrong_side_fails(self, cli_runner):
        args = [
            "--symbol",
            "BTC-USDT",
            "--side",
            "long",
            "--entry",
            "45000",
            "--stop-loss",
            "45500",
            "--balance",
            "1000",
            "--risk",
            "2",
        ]

        result = cli_runner.invoke(calculate_command, args)

        assert result.exit_code == 1
        assert "Calculation failed" in result.output

    def test_unknown_strategy_fails(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--strategy", "martingale"])

        assert result.exit_code == 1
        assert "martingale" in result.output

    def test_unknown_profile_fails(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--profile", "missing"])

        assert result.exit_code == 1
        assert "Profile 'missing' not found" in result.output

    def test_unknown_param_fails(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--param", "rr_ration=3"])

        assert result.exit_code == 1
        assert "Calculation failed" in result.output

    def test_strategy_and_profile_are_exclusive(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--strategy", "conservative", "--profile", "scaled"])

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_non_numeric_entry_is_usage_error(self, cli_runner):
        args = [
            "--symbol",
            "BTC-USDT",
            "--side",
            "long",
            "--entry",
            "abc",
            "--stop-loss",
            "44500",
            "--balance",
            "1000",
            "--risk",
            "2",
        ]

        result = cli_runner.invoke(calculate_command, args)

        assert result.exit_code == 2
        assert "not a valid number" in result.output

    def test_missing_required_option(self, cli_runner):
        result = cli_runner.invoke(calculate_command, ["--symbol", "BTC-USDT"])

        assert result.exit_code == 2
        assert "Missing option" in result.output

    def test_malformed_param_is_usage_error(self, cli_runner, base_args):
        result = cli_runner.invoke(calculate_command, [*base_args, "--param", "rr_ratio"])

        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output


class TestParameterParsing:
    """Test option parsing helpers."""

    def test_decimal_type_converts(self):
        assert str(DECIMAL.convert("45000.50", None, None)) == "45000.50"

    @pytest.mark.parametrize("raw", ["abc", "nan", "inf"])
    def test_decimal_type_rejects(self, raw):
        with pytest.raises(click.BadParameter):
            DECIMAL.convert(raw, None, None)

    def test_parse_strategy_params_yaml_scalars(self):
        params = _parse_strategy_params(("rr_ratio=3", "callback_rate=0.5", "description=tight"))

        assert params == {"rr_ratio": 3, "callback_rate": 0.5, "description": "tight"}

    def test_parse_strategy_params_empty(self):
        assert _parse_strategy_params(()) == {}
