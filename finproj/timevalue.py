"""
Time-value-of-money primitives for FinProj.

Purpose
-------
Pure math building blocks shared by the rest of the engine: compound growth,
level loan payments, amortization schedules and savings projections. No
dependencies on other engine modules beyond rate conversion helpers.

Conventions
-----------
- Rates are nominal annual percentages (``18.0`` means 18%/year).
- The per-period rate is ``annual_rate_percent / 100 / periods_per_year``.
- Periods are 1-indexed: period 1 is the end of the first period.

Formulas
--------
Compound interest:
    FV = P · (1 + r/n)^(n·years)

Level payment (ordinary annuity), with i = r/n and N = n·years:
    PMT = P · i · (1+i)^N / ((1+i)^N − 1)        (i > 0)
    PMT = P / N                                    (i = 0)

Example
-------
>>> from finproj.timevalue import loan_payment, amortization_schedule
>>> loan_payment(200_000, 6.0, 30)
1199.10...
>>> rows = amortization_schedule(10_000, 12.0, 1)
>>> len(rows), rows[-1].balance
(12, 0.0)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import List, Literal

import pandas as pd
from loguru import logger

from .constants import BALANCE_EPSILON, MONTHS_PER_YEAR
from .exceptions import DomainError
from .utils import check_non_negative, periodic_rate

__all__ = [
    "AmortizationRow",
    "SavingsRow",
    "compound_interest",
    "loan_payment",
    "amortization_schedule",
    "projected_savings",
    "savings_projection",
]


@dataclass(frozen=True)
class AmortizationRow:
    """One period of an amortization schedule."""
    period: int
    payment: float
    principal: float
    interest: float
    balance: float


@dataclass(frozen=True)
class SavingsRow:
    """One period of a savings projection."""
    period: int
    balance: float
    contributions: float
    earnings: float


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _period_count(years: float, periods_per_year: int) -> int:
    """Number of payment periods, rounding non-integral products."""
    if periods_per_year <= 0:
        raise DomainError(f"periods_per_year must be > 0, got {periods_per_year}")
    if years <= 0:
        raise DomainError(
            f"years must be > 0 for an amortizing loan, got {years}. "
            f"A zero-length term has no payment schedule."
        )
    n = int(round(years * periods_per_year))
    if n < 1:
        raise DomainError(
            f"years={years} with periods_per_year={periods_per_year} "
            f"yields no payment periods"
        )
    return n


# ---------------------------------------------------------------------------
# Growth
# ---------------------------------------------------------------------------

def compound_interest(
    principal: float,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = MONTHS_PER_YEAR,
) -> float:
    """
    Future value of *principal* compounded *periods_per_year* times a year.

    Parameters
    ----------
    principal : float
        Present value.
    annual_rate_percent : float
        Nominal annual rate in percent.
    years : float
        Horizon in years (fractional allowed, must be >= 0).
    periods_per_year : int, default 12
        Compounding frequency.

    Returns
    -------
    float
        ``principal * (1 + r/n) ** (n * years)``

    Examples
    --------
    >>> compound_interest(1_000, 12.0, 1)
    1126.825...
    """
    check_non_negative("years", years)
    if periods_per_year <= 0:
        raise DomainError(f"periods_per_year must be > 0, got {periods_per_year}")
    i = periodic_rate(annual_rate_percent, periods_per_year)
    return float(principal * (1.0 + i) ** (periods_per_year * years))


# ---------------------------------------------------------------------------
# Loans
# ---------------------------------------------------------------------------

def loan_payment(
    principal: float,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = MONTHS_PER_YEAR,
) -> float:
    """
    Level periodic payment that amortizes *principal* over *years*.

    Parameters
    ----------
    principal : float
        Amount borrowed. Must be > 0.
    annual_rate_percent : float
        Nominal annual rate in percent. Must be >= 0.
    years : float
        Loan term. Must be > 0.
    periods_per_year : int, default 12
        Payments per year.

    Returns
    -------
    float
        Periodic payment. A zero rate spreads principal evenly.

    Raises
    ------
    DomainError
        If principal <= 0, years <= 0 (including the zero-rate/zero-years
        combination) or the rate is negative.

    Examples
    --------
    >>> loan_payment(500_000, 7.0, 30)
    3326.51...
    >>> loan_payment(1_200, 0.0, 1)
    100.0
    """
    if principal <= 0:
        raise DomainError(f"principal must be > 0, got {principal}")
    if annual_rate_percent < 0:
        raise DomainError(f"annual_rate_percent must be >= 0, got {annual_rate_percent}")
    n = _period_count(years, periods_per_year)
    i = periodic_rate(annual_rate_percent, periods_per_year)

    if i == 0.0:
        return float(principal) / n

    growth = (1.0 + i) ** n
    return float(principal * i * growth / (growth - 1.0))


def amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = MONTHS_PER_YEAR,
    *,
    output: Literal["list", "dataframe"] = "list",
) -> List[AmortizationRow] | pd.DataFrame:
    """
    Period-by-period split of a level payment into principal and interest.

    Parameters
    ----------
    principal, annual_rate_percent, years, periods_per_year
        Same meaning and validation as :func:`loan_payment`.
    output : {"list", "dataframe"}, default "list"
        - "list": list of AmortizationRow
        - "dataframe": pd.DataFrame indexed by period

    Returns
    -------
    list[AmortizationRow] or pd.DataFrame
        Exactly ``years * periods_per_year`` rows.

    Notes
    -----
    - Balances within BALANCE_EPSILON (relative to principal) clamp to 0.
    - The final period pays off whatever balance floating-point drift left,
      so ``sum(row.principal) == principal`` within MONEY_TOLERANCE.
    """
    if output not in ("list", "dataframe"):
        raise ValueError(f"output must be 'list' or 'dataframe', got: {output}")

    payment = loan_payment(principal, annual_rate_percent, years, periods_per_year)
    n = _period_count(years, periods_per_year)
    i = periodic_rate(annual_rate_percent, periods_per_year)
    eps = BALANCE_EPSILON * float(principal)

    rows: List[AmortizationRow] = []
    balance = float(principal)
    for period in range(1, n + 1):
        interest = balance * i
        principal_paid = payment - interest
        period_payment = payment
        if period == n:
            principal_paid = balance
            period_payment = principal_paid + interest
        balance -= principal_paid
        if abs(balance) <= eps:
            balance = 0.0
        rows.append(
            AmortizationRow(
                period=period,
                payment=period_payment,
                principal=principal_paid,
                interest=interest,
                balance=max(0.0, balance),
            )
        )

    logger.debug(
        "Amortized {:.2f} at {}% over {} periods (payment {:.2f})",
        principal, annual_rate_percent, n, payment,
    )

    if output == "dataframe":
        return pd.DataFrame([asdict(r) for r in rows]).set_index("period")
    return rows


# ---------------------------------------------------------------------------
# Savings
# ---------------------------------------------------------------------------

def projected_savings(
    current_savings: float,
    monthly_contribution: float,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = MONTHS_PER_YEAR,
) -> float:
    """
    Future value of current savings plus a level contribution per period.

    FV = S·(1+i)^N + PMT·((1+i)^N − 1)/i, and S + PMT·N when i = 0.
    """
    check_non_negative("current_savings", current_savings)
    check_non_negative("monthly_contribution", monthly_contribution)
    check_non_negative("years", years)
    if periods_per_year <= 0:
        raise DomainError(f"periods_per_year must be > 0, got {periods_per_year}")

    i = periodic_rate(annual_rate_percent, periods_per_year)
    n = periods_per_year * years
    if i == 0.0:
        return float(current_savings + monthly_contribution * n)
    growth = (1.0 + i) ** n
    return float(current_savings * growth + monthly_contribution * (growth - 1.0) / i)


def savings_projection(
    current_savings: float,
    monthly_contribution: float,
    annual_rate_percent: float,
    years: float,
    periods_per_year: int = MONTHS_PER_YEAR,
) -> List[SavingsRow]:
    """Per-period savings balance, cumulative contributions and earnings."""
    n = int(round(years * periods_per_year))
    rows: List[SavingsRow] = []
    for period in range(1, n + 1):
        balance = projected_savings(
            current_savings,
            monthly_contribution,
            annual_rate_percent,
            period / periods_per_year,
            periods_per_year,
        )
        contributed = monthly_contribution * period
        rows.append(
            SavingsRow(
                period=period,
                balance=balance,
                contributions=contributed,
                earnings=balance - current_savings - contributed,
            )
        )
    return rows
