"""
Global constants for FinProj.

Purpose
-------
Centralizes default values and magic numbers used throughout the FinProj
codebase. Using constants instead of hardcoded values keeps iteration caps,
tolerances and calendar conventions consistent across modules.

Usage
-----
>>> from finproj.constants import MAX_PAYOFF_MONTHS, DEFAULT_RATE_GUESS
>>>
>>> result = simulate_payoff(5_000, 18.0, 150, max_months=MAX_PAYOFF_MONTHS)

Categories
----------
- Time: calendar conversions and default history window
- Rate solver: Newton-Raphson defaults
- Debt: payoff simulation cap
- Money: rounding tolerances
"""

__all__ = [
    # Time
    "MONTHS_PER_YEAR",
    "DEFAULT_HISTORY_MONTHS",
    # Rate solver
    "DEFAULT_RATE_GUESS",
    "DEFAULT_TOLERANCE",
    "DEFAULT_MAX_ITERS",
    # Debt
    "MAX_PAYOFF_MONTHS",
    # Money
    "MONEY_TOLERANCE",
    "BALANCE_EPSILON",
]


# =============================================================================
# Time
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of months in a year (used for rate and period conversions)."""

DEFAULT_HISTORY_MONTHS: int = 12
"""Trailing window used by net-worth reconstruction when no range is given."""


# =============================================================================
# Rate Solver Defaults
# =============================================================================

DEFAULT_RATE_GUESS: float = 0.10
"""Initial Newton-Raphson guess for the per-period rate."""

DEFAULT_TOLERANCE: float = 1e-5
"""Convergence tolerance on successive rate iterates."""

DEFAULT_MAX_ITERS: int = 100
"""Iteration budget before the solver gives up and returns None."""


# =============================================================================
# Debt Defaults
# =============================================================================

MAX_PAYOFF_MONTHS: int = 360
"""Hard cap on simulated payoff months (30 years)."""


# =============================================================================
# Money
# =============================================================================

MONEY_TOLERANCE: float = 1e-2
"""Tolerance for monetary identities (sums of portions, schedule totals)."""

BALANCE_EPSILON: float = 1e-9
"""Relative drift below which a running balance is treated as zero."""
