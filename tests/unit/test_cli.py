"""
Unit tests for CLI module.

Tests command-line interface functionality using Click's testing utilities.
"""

import json
import sys

import pytest
from click.testing import CliRunner
from loguru import logger

from finproj.cli import main, __version__


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures loguru; point it back at the real stderr."""
    yield
    logger.remove()
    logger.add(sys.stderr)


# ============================================================================
# GROUP TESTS
# ============================================================================

class TestMain:
    """Test the command group."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output
        assert "finproj" in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("amortize", "irr", "payoff", "networth", "goals", "income"):
            assert command in result.output


# ============================================================================
# AMORTIZE / IRR TESTS
# ============================================================================

class TestAmortize:
    """Test the amortize command."""

    def test_quiet_summary(self, runner):
        result = runner.invoke(main, ["--quiet", "amortize", "1200", "0", "1"])

        assert result.exit_code == 0
        assert "Payment: $100.00" in result.output
        assert "Periods: 12" in result.output
        assert "Total interest: $0.00" in result.output

    def test_table_output(self, runner):
        result = runner.invoke(main, ["amortize", "10000", "12", "1", "-n", "3"])

        assert result.exit_code == 0
        assert "Loan Summary" in result.output
        assert "Amortization Schedule" in result.output

    def test_saves_schedule(self, runner, tmp_path):
        path = tmp_path / "schedule.json"
        result = runner.invoke(main, ["amortize", "1200", "0", "1", "-o", str(path)])

        assert result.exit_code == 0
        assert "Results saved to" in result.output
        assert len(json.loads(path.read_text())["result"]) == 12

    def test_invalid_principal(self, runner):
        result = runner.invoke(main, ["amortize", "0", "5", "10"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "principal" in result.output


class TestIrr:
    """Test the irr command."""

    def test_single_period(self, runner):
        result = runner.invoke(main, ["--quiet", "irr", "1000", "1100"])

        assert result.exit_code == 0
        assert "Rate per period: 10.0000%" in result.output
        assert "Annualized:" in result.output

    def test_interim_flows(self, runner):
        result = runner.invoke(main, ["-q", "irr", "1000", "1100", "-f", "100", "-f", "100"])

        assert result.exit_code == 0
        assert "Rate per period: 10.0000%" in result.output

    def test_no_solution(self, runner):
        result = runner.invoke(main, ["-q", "irr", "1000", "0"])

        assert result.exit_code == 0
        assert "could not be determined" in result.output

    def test_invalid_outlay(self, runner):
        result = runner.invoke(main, ["irr", "0", "1100"])
        assert result.exit_code == 1


# ============================================================================
# RECORDS-FILE COMMAND TESTS
# ============================================================================

class TestPayoff:
    """Test the payoff command."""

    def test_quiet_summary(self, runner, records_file):
        result = runner.invoke(main, ["-q", "payoff", "-c", str(records_file)])

        assert result.exit_code == 0
        assert "Strategy: avalanche" in result.output
        assert "Total debt: $1,500.00" in result.output
        assert "Monthly cost: $80.00" in result.output

    def test_strategy_and_extra(self, runner, records_file):
        result = runner.invoke(main, ["-q", "payoff", "-c", str(records_file),
                                      "-s", "snowball", "-e", "20"])

        assert result.exit_code == 0
        assert "Strategy: snowball" in result.output
        assert "Monthly cost: $100.00" in result.output

    def test_saves_plan(self, runner, records_file, tmp_path):
        path = tmp_path / "plan.json"
        result = runner.invoke(main, ["payoff", "-c", str(records_file), "-o", str(path)])

        assert result.exit_code == 0
        payload = json.loads(path.read_text())
        assert payload["result_type"] == "StrategyPlan"
        assert payload["result"]["strategy"] == "avalanche"

    def test_unknown_strategy(self, runner, records_file):
        result = runner.invoke(main, ["payoff", "-c", str(records_file), "-s", "random"])
        assert result.exit_code == 2

    def test_negative_extra(self, runner, records_file):
        result = runner.invoke(main, ["payoff", "-c", str(records_file), "-e", "-5"])

        assert result.exit_code == 1
        assert "additional_payment" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["payoff", "-c", str(tmp_path / "nope.json")])
        assert result.exit_code == 2

    def test_malformed_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        result = runner.invoke(main, ["payoff", "-c", str(path)])

        assert result.exit_code == 1
        assert "could not load" in result.output


class TestNetworth:
    """Test the networth command."""

    def test_monthly_lines(self, runner, records_file):
        result = runner.invoke(main, ["-q", "networth", "-c", str(records_file),
                                      "--start", "2024-01-01", "--end", "2024-03-01"])

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines == [
            "2024-01-01: $296,200.00",
            "2024-02-01: $296,200.00",
            "2024-03-01: $297,200.00",
        ]

    def test_start_after_end(self, runner, records_file):
        result = runner.invoke(main, ["networth", "-c", str(records_file),
                                      "--start", "2024-06-01", "--end", "2024-01-01"])

        assert result.exit_code == 1
        assert "after" in result.output


class TestGoals:
    """Test the goals command."""

    def test_projection(self, runner, records_file):
        result = runner.invoke(main, ["-q", "goals", "-c", str(records_file),
                                      "--today", "2025-01-15"])

        assert result.exit_code == 0
        assert "Car: 20.0% (required $3,636.36/mo)" in result.output
        assert "Average progress: 20.0%" in result.output

    def test_table_output(self, runner, records_file):
        result = runner.invoke(main, ["goals", "-c", str(records_file), "--today", "2025-01-15"])

        assert result.exit_code == 0
        assert "Goal Analytics" in result.output


class TestIncome:
    """Test the income command."""

    def test_projection(self, runner, records_file):
        result = runner.invoke(main, ["-q", "income", "-c", str(records_file), "-m", "3"])

        assert result.exit_code == 0
        assert "Month 0: $130,000.00" in result.output
        assert "Month 2: $30,000.00" in result.output
        assert "Recurring income/mo: $50,000.00" in result.output
        assert "Net cash flow: $190,000.00" in result.output
