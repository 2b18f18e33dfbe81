"""
Income normalization module for FinProj.

Purpose
-------
Normalizes income (and expense) items with different recurrences to a
common monthly figure and projects them forward month by month. Produces
plain lists or calendar-indexed pandas objects for reporting.

Key components
--------------
- Frequency:
    Closed set of recurrences (one_time, monthly, quarterly, yearly).

- IncomeRecord:
    One income or expense item.

- to_monthly_equivalent / project_months:
    Monthly normalization and forward projection.

- projected_income / project_net_cash_flow:
    Recurring-income summary and income-minus-expenses projection.

Projection rules
----------------
- Months are 0-indexed from the current month.
- Recurring items add their monthly equivalent to every month.
- One-time items add their full amount to month 0 only.

Example
-------
>>> from datetime import date
>>> from finproj.income import IncomeRecord, project_months
>>> records = [
...     IncomeRecord(50_000, "monthly", date(2025, 1, 1)),
...     IncomeRecord(100_000, "one_time", date(2025, 1, 10)),
... ]
>>> [m.total for m in project_months(records, 3)]
[150000.0, 50000.0, 50000.0]
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Literal, Optional, Sequence, Union

import pandas as pd

from .exceptions import ValidationError
from .utils import check_non_negative, month_index

__all__ = [
    "Frequency",
    "IncomeRecord",
    "MonthlyTotal",
    "IncomeProjection",
    "NetCashFlow",
    "to_monthly_equivalent",
    "project_months",
    "projected_income",
    "project_net_cash_flow",
]


class Frequency(str, Enum):
    """Recurrence of an income or expense item."""
    ONE_TIME = "one_time"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Union["Frequency", str]) -> "Frequency":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValidationError(f"frequency must be one of {valid}, got {value!r}") from None

    @property
    def is_recurring(self) -> bool:
        return self is not Frequency.ONE_TIME


# Months covered by one occurrence; one-time amounts are never divided
_MONTHS_PER_OCCURRENCE = {
    Frequency.ONE_TIME: 1,
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}


@dataclass(frozen=True)
class IncomeRecord:
    """
    Income or expense item.

    Parameters
    ----------
    amount : float
        Amount per occurrence (>= 0).
    frequency : Frequency or str
        Recurrence; strings are parsed, unknown values raise ValidationError.
    date : datetime.date
        First (or only) occurrence.
    income_type : str
        Grouping key ("salary", "rent", ...).
    description : str
        Free text.
    """
    amount: float
    frequency: Frequency
    date: date
    income_type: str = "other"
    description: str = ""

    def __post_init__(self):
        check_non_negative("amount", self.amount)
        object.__setattr__(self, "frequency", Frequency.parse(self.frequency))

    @property
    def monthly_equivalent(self) -> float:
        return to_monthly_equivalent(self.amount, self.frequency)


@dataclass(frozen=True)
class MonthlyTotal:
    """Projected total for one month (0 = current month)."""
    month_index: int
    total: float


@dataclass(frozen=True)
class IncomeProjection:
    """Summary over recurring sources only."""
    monthly_projection: float = 0.0
    total_projection: float = 0.0
    projection_period: int = 12
    recurring_sources_count: int = 0


@dataclass(frozen=True)
class NetCashFlow:
    """Projected income, expenses and their difference for one month."""
    month_index: int
    income: float
    expenses: float
    net: float


def to_monthly_equivalent(amount: float, frequency: Union[Frequency, str]) -> float:
    """
    Convert an amount at *frequency* to a per-month figure.

    monthly → amount, quarterly → amount/3, yearly → amount/12,
    one_time → amount (not spread).

    Examples
    --------
    >>> to_monthly_equivalent(120_000, "yearly")
    10000.0
    """
    freq = Frequency.parse(frequency)
    return float(amount) / _MONTHS_PER_OCCURRENCE[freq]


def _month_totals(records: Sequence[IncomeRecord], num_months: int) -> List[float]:
    recurring = sum(r.monthly_equivalent for r in records if r.frequency.is_recurring)
    one_time = sum(float(r.amount) for r in records if not r.frequency.is_recurring)
    totals = [float(recurring)] * num_months
    if num_months > 0:
        totals[0] += one_time
    return totals


def project_months(
    records: Sequence[IncomeRecord],
    num_months: int,
    *,
    start: Optional[date] = None,
    output: Literal["list", "series"] = "list",
) -> List[MonthlyTotal] | pd.Series:
    """
    Project monthly totals for *num_months* months.

    Parameters
    ----------
    records : sequence of IncomeRecord
        Empty input yields zero totals.
    num_months : int
        Horizon; ``<= 0`` yields an empty result.
    start : date, optional
        Calendar month of index 0 for ``output="series"`` (current month
        when None).
    output : {"list", "series"}, default "list"
        - "list": list of MonthlyTotal
        - "series": pd.Series named "total" indexed by first-of-month dates

    Raises
    ------
    ValueError
        If `output` is not 'list' or 'series'.
    """
    if output not in ("list", "series"):
        raise ValueError(f"output must be 'list' or 'series', got: {output}")

    n = max(0, int(num_months))
    totals = _month_totals(records, n)

    if output == "series":
        return pd.Series(totals, index=month_index(start, n), name="total", dtype=float)
    return [MonthlyTotal(month_index=i, total=t) for i, t in enumerate(totals)]


def projected_income(records: Sequence[IncomeRecord], months: int = 12) -> IncomeProjection:
    """
    Monthly and total projection over recurring records only.

    One-time items are left out so the figure reflects dependable income.
    """
    recurring = [r for r in records if r.frequency.is_recurring]
    if not recurring:
        return IncomeProjection(projection_period=months)

    monthly = float(sum(r.monthly_equivalent for r in recurring))
    return IncomeProjection(
        monthly_projection=monthly,
        total_projection=monthly * months,
        projection_period=months,
        recurring_sources_count=len(recurring),
    )


def project_net_cash_flow(
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[IncomeRecord],
    num_months: int,
    *,
    start: Optional[date] = None,
    output: Literal["list", "dataframe"] = "list",
) -> List[NetCashFlow] | pd.DataFrame:
    """
    Income minus expenses per month, both sides following project_months rules.

    Examples
    --------
    >>> df = project_net_cash_flow(incomes, expenses, 12, output="dataframe")
    >>> df["net"].sum()
    """
    if output not in ("list", "dataframe"):
        raise ValueError(f"output must be 'list' or 'dataframe', got: {output}")

    n = max(0, int(num_months))
    income_totals = _month_totals(incomes, n)
    expense_totals = _month_totals(expenses, n)

    if output == "dataframe":
        df = pd.DataFrame(
            {"income": income_totals, "expenses": expense_totals},
            index=month_index(start, n),
            dtype=float,
        )
        df["net"] = df["income"] - df["expenses"]
        return df
    return [
        NetCashFlow(month_index=i, income=inc, expenses=exp, net=inc - exp)
        for i, (inc, exp) in enumerate(zip(income_totals, expense_totals))
    ]
