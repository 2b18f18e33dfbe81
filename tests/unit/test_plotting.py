"""
Unit tests for plotting.py module.

Tests the amortization, net-worth and payoff-comparison plots:
- return value and reuse of a supplied Axes
- empty-input placeholders
- saving to disk
"""

import pytest
from datetime import date

# Use non-interactive backend for testing
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from finproj.debt import DebtAnalytics, get_analytics
from finproj.networth import reconstruct
from finproj.plotting import plot_amortization, plot_net_worth, plot_payoff_comparison
from finproj.timevalue import amortization_schedule


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def close_figures():
    """Close figures created by each test."""
    yield
    plt.close("all")


@pytest.fixture
def schedule():
    return amortization_schedule(10_000, 12.0, 1)


@pytest.fixture
def points(house, iou, index_fund, debt_with_payments):
    return reconstruct([house], [iou], [index_fund], [debt_with_payments],
                       date(2024, 1, 1), date(2024, 12, 1))


# ============================================================================
# AMORTIZATION PLOT TESTS
# ============================================================================

class TestPlotAmortization:
    """Test plot_amortization()."""

    def test_returns_axes(self, schedule):
        ax = plot_amortization(schedule)

        assert isinstance(ax, plt.Axes)
        assert ax.get_title() == "Amortization Schedule"
        assert len(ax.patches) == 2 * len(schedule)

    def test_uses_given_axes(self, schedule):
        _, ax = plt.subplots()
        assert plot_amortization(schedule, ax=ax, title="Car loan") is ax
        assert ax.get_title() == "Car loan"

    def test_empty_schedule(self):
        ax = plot_amortization([])
        assert not ax.axison

    def test_save_path(self, schedule, tmp_path):
        path = tmp_path / "amortization.png"
        plot_amortization(schedule, save_path=str(path))
        assert path.exists()


# ============================================================================
# NET WORTH PLOT TESTS
# ============================================================================

class TestPlotNetWorth:
    """Test plot_net_worth()."""

    def test_three_series(self, points):
        ax = plot_net_worth(points)
        labels = [t.get_text() for t in ax.get_legend().get_texts()]

        assert labels == ["Assets", "Liabilities", "Net worth"]

    def test_custom_colors(self, points):
        ax = plot_net_worth(points, colors={"net_worth": "red"}, legend=False)

        assert ax.get_legend() is None
        assert ax.get_lines()[2].get_color() == "red"

    def test_empty_series(self):
        assert not plot_net_worth([]).axison


# ============================================================================
# PAYOFF COMPARISON PLOT TESTS
# ============================================================================

class TestPlotPayoffComparison:
    """Test plot_payoff_comparison()."""

    def test_one_group_per_strategy(self, two_debts):
        ax = plot_payoff_comparison(get_analytics(two_debts))
        ticks = [t.get_text() for t in ax.get_xticklabels()]

        assert ticks == ["Minimum", "Snowball", "Avalanche"]
        assert len(ax.patches) == 3

    def test_no_debts(self):
        assert not plot_payoff_comparison(DebtAnalytics()).axison
