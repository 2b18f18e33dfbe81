"""General utilities for FinProj

Contents
--------
- Validation helpers
- Rate conversions (annual percent → periodic fraction)
- Calendar helpers (month arithmetic, first-of-month index)
- Formatters (currency strings, matplotlib axis ticks)
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import List, Optional

import pandas as pd

from .constants import MONTHS_PER_YEAR
from .exceptions import ValidationError

__all__ = [
    # Validation
    "check_non_negative",
    "check_positive",
    # Rates
    "periodic_rate",
    # Calendar
    "add_months",
    "months_between",
    "month_range",
    "month_index",
    # Formatters
    "format_currency",
    "compact_formatter",
]

# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative (strict)."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


def check_positive(name: str, value: float) -> None:
    """Raise if *value* is zero or negative."""
    if value <= 0:
        raise ValidationError(f"{name} must be positive (got {value}).")


# ---------------------------------------------------------------------------
# Rate conversions
# ---------------------------------------------------------------------------

def periodic_rate(annual_rate_percent: float, periods_per_year: int = MONTHS_PER_YEAR) -> float:
    """Convert a nominal annual percentage to a per-period fraction.

    Uses simple division (APR convention): 18.0, 12 → 0.015.
    """
    return float(annual_rate_percent) / 100.0 / float(periods_per_year)


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def add_months(d: date, months: int) -> date:
    """Shift *d* by whole calendar months, clamping the day to month end.

    >>> add_months(date(2025, 1, 31), 1)
    datetime.date(2025, 2, 28)
    """
    total = d.year * 12 + (d.month - 1) + int(months)
    year, month0 = divmod(total, 12)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return date(year, month0 + 1, min(d.day, last_day))


def months_between(start: date, end: date) -> int:
    """Whole calendar months from *start* to *end* (year*12+month difference).

    Day-of-month is ignored, matching whole-month billing cycles. Can be
    negative when *end* precedes *start*.
    """
    return (end.year - start.year) * 12 + (end.month - start.month)


def month_range(start: date, end: date) -> List[date]:
    """Dates ``start + k months`` for k = 0, 1, ... while ``<= end``.

    Each date is computed from *start* (not cumulatively), so a start on the
    31st returns to the 31st in long months.
    """
    out: List[date] = []
    k = 0
    current = start
    while current <= end:
        out.append(current)
        k += 1
        current = add_months(start, k)
    return out


def month_index(start: Optional[date], months: int) -> pd.DatetimeIndex:
    """Construct a first-of-month DatetimeIndex for *months* periods.

    If *start* is None, uses the current month as the first period.
    """
    if months <= 0:
        return pd.DatetimeIndex([], dtype="datetime64[ns]")
    if start is None:
        today = pd.Timestamp.today().normalize()
        first = pd.Timestamp(today.year, today.month, 1)
    else:
        first = pd.Timestamp(start.year, start.month, 1)
    return pd.date_range(start=first, periods=months, freq="MS")


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

def format_currency(value: float, decimals: int = 2, symbol: str = "$") -> str:
    """
    Format a monetary value for tables and messages.

    Parameters
    ----------
    value : float
        Monetary value in raw units.
    decimals : int, default 2
        Number of decimal places to display.
    symbol : str, default '$'
        Currency symbol prefix.

    Returns
    -------
    str
        Formatted string with thousands separators, e.g. ``'$1,234.50'``.
        Negative values keep the sign before the symbol: ``'-$80.00'``.

    Examples
    --------
    >>> format_currency(1234.5)
    '$1,234.50'
    >>> format_currency(-80, decimals=0)
    '-$80'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def compact_formatter(x, pos):
    """
    Format axis values compactly for matplotlib FuncFormatter.

    - 2_500_000 → "2.5M"
    - 40_000 → "40k"
    - 950 → "950"
    - 0 → "0"
    """
    if x == 0:
        return "0"
    for scale, suffix in ((1e6, "M"), (1e3, "k")):
        if abs(x) >= scale:
            val = x / scale
            return f"{val:.0f}{suffix}" if val == int(val) else f"{val:.1f}{suffix}"
    return f"{x:.0f}"
