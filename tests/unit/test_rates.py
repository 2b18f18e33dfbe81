"""
Unit tests for rates.py module.

Tests NPV helpers, the Newton-Raphson rate solver and annualization.
"""

import pytest

from finproj.config import RateSolverConfig
from finproj.exceptions import DomainError, ValidationError
from finproj.rates import (
    CashFlow,
    annualize_rate,
    npv,
    npv_derivative,
    solve_rate,
)


# ============================================================================
# CASH FLOW TESTS
# ============================================================================

class TestCashFlow:
    """Test CashFlow validation."""

    def test_valid_cash_flow(self):
        cf = CashFlow(100.0, 3)
        assert cf.amount == 100.0
        assert cf.period_index == 3

    @pytest.mark.parametrize("period", [0, -1, 1.5])
    def test_invalid_period_raises(self, period):
        """Period indices must be integers >= 1."""
        with pytest.raises(ValidationError, match="period_index"):
            CashFlow(100.0, period)

    def test_non_increasing_periods_raise(self):
        """Periods must be strictly increasing."""
        with pytest.raises(ValidationError, match="strictly increasing"):
            npv(0.1, 1_000, [CashFlow(50, 2), CashFlow(50, 2)], 1_000)

    def test_mixed_series_raises(self):
        with pytest.raises(ValidationError, match="all CashFlow"):
            npv(0.1, 1_000, [CashFlow(50, 1), 50.0], 1_000)


# ============================================================================
# NPV TESTS
# ============================================================================

class TestNPV:
    """Test npv() and npv_derivative()."""

    def test_npv_zero_at_true_rate(self):
        """1000 → 1100 after one period has NPV 0 at 10%."""
        assert npv(0.10, 1_000, [], 1_100) == pytest.approx(0.0)

    def test_npv_with_interim_flows(self):
        """10% coupon bond priced at par has NPV 0 at 10%."""
        assert npv(0.10, 1_000, [100, 100], 1_100) == pytest.approx(0.0, abs=1e-9)

    def test_plain_floats_match_cash_flows(self):
        """Plain floats map to periods 1..k."""
        a = npv(0.07, 1_000, [100, 200], 900)
        b = npv(0.07, 1_000, [CashFlow(100, 1), CashFlow(200, 2)], 900)
        assert a == pytest.approx(b)

    def test_explicit_periods_change_timing(self):
        """A gap in periods pushes the terminal value later."""
        dense = npv(0.05, 1_000, [CashFlow(100, 1)], 1_000)
        sparse = npv(0.05, 1_000, [CashFlow(100, 3)], 1_000)
        assert sparse < dense

    def test_derivative_matches_finite_difference(self):
        h = 1e-6
        args = (1_000, [100, 150, 80], 900)
        numeric = (npv(0.08 + h, *args) - npv(0.08 - h, *args)) / (2 * h)
        assert npv_derivative(0.08, *args) == pytest.approx(numeric, rel=1e-5)


# ============================================================================
# SOLVER TESTS
# ============================================================================

class TestSolveRate:
    """Test solve_rate()."""

    def test_single_period(self):
        """Outlay 1000, terminal 1100 → 10% per period."""
        assert solve_rate(1_000, [], 1_100) == pytest.approx(0.10, abs=1e-5)

    def test_par_bond(self):
        """Two 10% coupons then 1100 → 10% per period."""
        rate = solve_rate(1_000, [CashFlow(100, 1), CashFlow(100, 2)], 1_100)
        assert rate == pytest.approx(0.10, abs=1e-5)

    def test_flat_series_converges_to_zero(self):
        """Getting back exactly what was invested is a 0% return."""
        assert solve_rate(1_000, [], 1_000) == pytest.approx(0.0, abs=1e-5)

    def test_loss_gives_negative_rate(self):
        """Getting back less than invested yields a negative rate."""
        rate = solve_rate(1_000, [], 900)
        assert rate == pytest.approx(-0.10, abs=1e-5)

    def test_zero_terminal_with_flows(self):
        """Terminal value 0 is allowed."""
        rate = solve_rate(1_000, [600, 600], 0)
        assert rate is not None
        assert npv(rate, 1_000, [600, 600], 0) == pytest.approx(0.0, abs=1e-3)

    def test_root_satisfies_npv(self):
        flows = [120, 80, 150, 60]
        rate = solve_rate(1_000, flows, 950)
        assert rate is not None
        assert npv(rate, 1_000, flows, 950) == pytest.approx(0.0, abs=1e-3)

    @pytest.mark.parametrize("outlay", [0, -500])
    def test_non_positive_outlay_raises(self, outlay):
        with pytest.raises(DomainError, match="initial_outlay"):
            solve_rate(outlay, [], 1_100)

    def test_negative_terminal_raises(self):
        with pytest.raises(DomainError, match="terminal_value"):
            solve_rate(1_000, [], -1)

    def test_iteration_budget_exhausted_returns_none(self, log_messages):
        """One iteration from a far guess cannot converge."""
        rate = solve_rate(1_000, [100, 100], 1_100, guess=2.0, max_iterations=1)

        assert rate is None
        assert any(level == "WARNING" and "did not converge" in msg
                   for level, msg in log_messages)

    def test_zero_derivative_returns_none(self, log_messages):
        """Nothing received ever: NPV' is 0 everywhere."""
        assert solve_rate(1_000, [], 0) is None
        assert any("zero NPV derivative" in msg for _, msg in log_messages)

    def test_leaving_domain_returns_none(self):
        """A guess at or below -100% is outside the domain."""
        assert solve_rate(1_000, [], 1_100, guess=-1.5) is None

    def test_config_supplies_defaults(self):
        """Solver settings can come from a RateSolverConfig."""
        config = RateSolverConfig(max_iterations=1, guess=2.0)
        assert solve_rate(1_000, [100, 100], 1_100, config=config) is None

    def test_explicit_arguments_override_config(self):
        config = RateSolverConfig(max_iterations=1, guess=2.0)
        rate = solve_rate(1_000, [], 1_100, guess=0.05, max_iterations=100, config=config)
        assert rate == pytest.approx(0.10, abs=1e-5)


# ============================================================================
# ANNUALIZATION TESTS
# ============================================================================

class TestAnnualizeRate:
    """Test annualize_rate()."""

    def test_monthly_to_annual(self):
        assert annualize_rate(0.01) == pytest.approx(0.126825, abs=1e-6)

    def test_zero_rate(self):
        assert annualize_rate(0.0) == 0.0

    def test_quarterly(self):
        assert annualize_rate(0.02, periods_per_year=4) == pytest.approx(1.02 ** 4 - 1)
