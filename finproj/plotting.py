"""
Plotting utilities for FinProj results.

Purpose
-------
Quick matplotlib views of engine outputs for notebooks and the CLI:

- plot_amortization: principal/interest split per period with the
  remaining balance on a twin axis
- plot_net_worth: assets, liabilities and net worth over time
- plot_payoff_comparison: months and interest per payoff strategy

Every function accepts an existing ``ax`` (a new figure is created when
None), an optional ``save_path``, and returns the axes it drew on.

Example
-------
>>> from finproj.timevalue import amortization_schedule
>>> from finproj.plotting import plot_amortization
>>> ax = plot_amortization(amortization_schedule(25_000, 6.5, 5))
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from matplotlib.ticker import FuncFormatter

from .debt import DebtAnalytics
from .networth import NetWorthPoint
from .timevalue import AmortizationRow
from .types import PlotColorsDict
from .utils import compact_formatter

__all__ = [
    "plot_amortization",
    "plot_net_worth",
    "plot_payoff_comparison",
]

_DEFAULT_COLORS: PlotColorsDict = {
    "principal": "#2196F3",
    "interest": "#FF9800",
    "balance": "black",
    "assets": "#4CAF50",
    "liabilities": "#F44336",
    "net_worth": "#3F51B5",
}


def _colors(overrides: Optional[PlotColorsDict]) -> PlotColorsDict:
    colors: PlotColorsDict = dict(_DEFAULT_COLORS)
    colors.update(overrides or {})
    return colors


def _no_data(ax, message: str):
    ax.set_axis_off()
    ax.text(0.5, 0.5, message, ha="center", va="center", transform=ax.transAxes)
    return ax


def _finish(ax, title: str, grid: bool, legend: bool, save_path: Optional[str]):
    ax.set_title(title)
    if grid:
        ax.grid(True, linestyle="--", alpha=0.4, zorder=0)
    if legend:
        ax.legend(loc="best")
    if save_path:
        ax.figure.savefig(save_path, bbox_inches="tight", dpi=150)
    return ax


def plot_amortization(
    schedule: Sequence[AmortizationRow],
    ax=None,
    figsize: tuple = (12, 6),
    title: str = "Amortization Schedule",
    grid: bool = True,
    legend: bool = True,
    colors: Optional[PlotColorsDict] = None,
    save_path: Optional[str] = None,
):
    """
    Stacked principal/interest bars per period with the balance line.

    Parameters
    ----------
    schedule : sequence of AmortizationRow
        Output of ``amortization_schedule(..., output="list")``.
    ax : matplotlib.axes.Axes, optional
        Axes to draw on; a new figure is created when None.
    figsize : tuple, default (12, 6)
        Figure size when creating a new figure.
    title : str
        Plot title.
    grid, legend : bool
        Toggle gridlines and legend.
    colors : PlotColorsDict, optional
        Keys "principal", "interest", "balance".
    save_path : str, optional
        Save the figure to this path.

    Returns
    -------
    matplotlib.axes.Axes
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots(figsize=figsize)
    if not schedule:
        return _no_data(ax, "No data (empty schedule)")

    c = _colors(colors)
    periods = np.array([r.period for r in schedule])
    principal = np.array([r.principal for r in schedule])
    interest = np.array([r.interest for r in schedule])
    balance = np.array([r.balance for r in schedule])

    ax.bar(periods, principal, color=c["principal"], label="Principal", zorder=2)
    ax.bar(periods, interest, bottom=principal, color=c["interest"], label="Interest", zorder=2)
    ax.set_xlabel("Period")
    ax.set_ylabel("Payment")

    ax_balance = ax.twinx()
    ax_balance.plot(periods, balance, color=c["balance"], linewidth=2, label="Balance")
    ax_balance.set_ylabel("Remaining balance")
    ax_balance.yaxis.set_major_formatter(FuncFormatter(compact_formatter))
    ax_balance.set_ylim(bottom=0)

    ax.text(0.02, 0.98,
            f"Total interest: ${interest.sum():,.0f}",
            transform=ax.transAxes, fontsize=9, verticalalignment="top",
            bbox=dict(boxstyle="round", facecolor="white", alpha=0.7), zorder=10)

    return _finish(ax, title, grid, legend, save_path)


def plot_net_worth(
    points: Sequence[NetWorthPoint],
    ax=None,
    figsize: tuple = (12, 6),
    title: str = "Net Worth",
    grid: bool = True,
    legend: bool = True,
    colors: Optional[PlotColorsDict] = None,
    save_path: Optional[str] = None,
):
    """
    Assets (incl. investments), liabilities (incl. debts) and net worth.

    Parameters
    ----------
    points : sequence of NetWorthPoint
        Output of ``networth.reconstruct``.
    ax, figsize, title, grid, legend, colors, save_path
        As in :func:`plot_amortization`; color keys "assets",
        "liabilities", "net_worth".

    Returns
    -------
    matplotlib.axes.Axes
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots(figsize=figsize)
    if not points:
        return _no_data(ax, "No data (empty series)")

    c = _colors(colors)
    dates = [p.date for p in points]
    ax.plot(dates, [p.assets + p.investments for p in points],
            color=c["assets"], linewidth=1.5, label="Assets")
    ax.plot(dates, [p.liabilities + p.debts for p in points],
            color=c["liabilities"], linewidth=1.5, label="Liabilities")
    ax.plot(dates, [p.net_worth for p in points],
            color=c["net_worth"], linewidth=2.5, label="Net worth")
    ax.axhline(0, color="gray", linewidth=0.8)

    ax.set_xlabel("Month")
    ax.yaxis.set_major_formatter(FuncFormatter(compact_formatter))
    for label in ax.get_xticklabels():
        label.set_rotation(45)
        label.set_ha("right")

    return _finish(ax, title, grid, legend, save_path)


def plot_payoff_comparison(
    analytics: DebtAnalytics,
    ax=None,
    figsize: tuple = (10, 5),
    title: str = "Payoff Strategy Comparison",
    grid: bool = True,
    legend: bool = True,
    colors: Optional[PlotColorsDict] = None,
    save_path: Optional[str] = None,
):
    """
    Months to payoff and total interest for each projected strategy.

    Parameters
    ----------
    analytics : DebtAnalytics
        Output of ``debt.get_analytics``; uses ``payoff_projection``.
    ax, figsize, title, grid, legend, colors, save_path
        As in :func:`plot_amortization`; color keys "principal" (months)
        and "interest" (interest).

    Returns
    -------
    matplotlib.axes.Axes
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _, ax = plt.subplots(figsize=figsize)
    if not analytics.payoff_projection:
        return _no_data(ax, "No data (no debts)")

    c = _colors(colors)
    names = list(analytics.payoff_projection)
    plans = [analytics.payoff_projection[n] for n in names]
    x = np.arange(len(names))
    width = 0.38

    ax.bar(x - width / 2, [p.total_months for p in plans], width,
           color=c["principal"], label="Months")
    ax.set_ylabel("Months to payoff")
    ax.set_xticks(x)
    ax.set_xticklabels([n.title() for n in names])

    ax_interest = ax.twinx()
    ax_interest.bar(x + width / 2, [p.total_interest for p in plans], width,
                    color=c["interest"], label="Interest")
    ax_interest.set_ylabel("Total interest")
    ax_interest.yaxis.set_major_formatter(FuncFormatter(compact_formatter))

    if legend:
        handles, labels = ax.get_legend_handles_labels()
        h2, l2 = ax_interest.get_legend_handles_labels()
        ax.legend(handles + h2, labels + l2, loc="best")
    return _finish(ax, title, grid, False, save_path)
