"""
Debt payoff planning module for FinProj.

Purpose
-------
Simulates how long debts take to pay off and how much interest they cost,
compares payoff strategies, and summarizes a debt portfolio.

Key components
--------------
- DebtRecord / PaymentEvent:
    Immutable inputs supplied by the persistence layer.

- simulate_payoff / payoff_timeline:
    Month-by-month simulation of a single debt under a fixed payment.
    Capped at MAX_PAYOFF_MONTHS (360) so pathological inputs terminate;
    a debt still open at the cap is reported with ``converged=False``.

- PayoffStrategy:
    Closed enum (avalanche, snowball, minimum) owning its ordering rule.

- plan_strategy / get_analytics:
    Multi-debt plans and portfolio analytics.

Strategy semantics
------------------
plan_strategy simulates every debt independently and applies the full
``additional_payment`` to each one; it does not cascade the extra amount
(or freed minimums) onto the top-priority debt the way textbook
snowball/avalanche plans do. The strategy therefore changes the ORDER of
the schedule, not the totals, whenever the additional payment is the same.

Example
-------
>>> from finproj.debt import DebtRecord, plan_strategy
>>> debts = [
...     DebtRecord(id=1, balance=1_000, annual_rate_percent=20, minimum_payment=50),
...     DebtRecord(id=2, balance=500, annual_rate_percent=15, minimum_payment=30),
... ]
>>> plan = plan_strategy(debts, "avalanche")
>>> [e.debt_id for e in plan.payoff_schedule]
[1, 2]
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Callable, Dict, Iterator, List, Literal, Optional, Sequence, Tuple, Union

import pandas as pd
from loguru import logger

from .config import PayoffConfig
from .constants import MONEY_TOLERANCE
from .exceptions import DomainError, ValidationError
from .utils import check_non_negative, periodic_rate

__all__ = [
    "DebtRecord",
    "PaymentEvent",
    "PayoffStrategy",
    "PayoffResult",
    "PayoffMonth",
    "PayoffScheduleEntry",
    "StrategyPlan",
    "DebtAnalytics",
    "simulate_payoff",
    "payoff_timeline",
    "split_payment",
    "plan_strategy",
    "get_analytics",
]

RecordId = Union[int, str]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentEvent:
    """
    Payment made against a debt.

    Invariant: ``principal_portion + interest_portion == amount`` within
    MONEY_TOLERANCE.
    """
    debt_id: RecordId
    amount: float
    date: date
    principal_portion: float
    interest_portion: float

    def __post_init__(self):
        if self.amount <= 0:
            raise ValidationError(f"payment amount must be > 0, got {self.amount}")
        check_non_negative("principal_portion", self.principal_portion)
        check_non_negative("interest_portion", self.interest_portion)
        total = self.principal_portion + self.interest_portion
        if abs(total - self.amount) > MONEY_TOLERANCE:
            raise ValidationError(
                f"principal_portion + interest_portion = {total:.2f} "
                f"does not match amount {self.amount:.2f}"
            )


@dataclass(frozen=True)
class DebtRecord:
    """
    Debt item as handed over by the persistence layer.

    Parameters
    ----------
    id : int or str
        Record identifier.
    balance : float
        Current outstanding balance (>= 0).
    annual_rate_percent : float
        Nominal APR in percent (>= 0).
    minimum_payment : float
        Required monthly payment (>= 0).
    due_date : date, optional
        Next due date; drives MINIMUM strategy ordering.
    name : str
        Display name.
    debt_type : str
        Grouping key for analytics (e.g. "credit_card", "loan").
    initial_balance : float, optional
        Balance when the debt was opened. Defaults to ``balance`` plus the
        principal portions of ``payments``.
    payments : tuple of PaymentEvent
        Recorded payments, used for net-worth reconstruction.
    """
    id: RecordId
    balance: float
    annual_rate_percent: float
    minimum_payment: float
    due_date: Optional[date] = None
    name: str = ""
    debt_type: str = "other"
    initial_balance: Optional[float] = None
    payments: Tuple[PaymentEvent, ...] = ()

    def __post_init__(self):
        check_non_negative("balance", self.balance)
        check_non_negative("annual_rate_percent", self.annual_rate_percent)
        check_non_negative("minimum_payment", self.minimum_payment)
        object.__setattr__(self, "payments", tuple(self.payments))
        if self.initial_balance is None:
            paid = sum(p.principal_portion for p in self.payments)
            object.__setattr__(self, "initial_balance", float(self.balance + paid))
        check_non_negative("initial_balance", self.initial_balance)

    @property
    def monthly_rate(self) -> float:
        """Per-month rate as a fraction."""
        return periodic_rate(self.annual_rate_percent)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PayoffResult:
    """Outcome of a single-debt payoff simulation."""
    months: int
    total_interest: float
    monthly_payment: float
    converged: bool = True
    remaining_balance: float = 0.0


@dataclass(frozen=True)
class PayoffMonth:
    """
    One simulated month of a payoff timeline.

    ``payment + unpaid_interest == principal + interest`` in every row;
    ``unpaid_interest`` is non-zero only when the payment does not cover
    the month's interest.
    """
    month: int
    payment: float
    principal: float
    interest: float
    balance: float
    unpaid_interest: float = 0.0


@dataclass(frozen=True)
class PayoffScheduleEntry:
    """Per-debt line of a strategy plan."""
    debt_id: RecordId
    name: str
    annual_rate_percent: float
    balance: float
    months: int
    total_interest: float
    monthly_payment: float
    converged: bool


@dataclass(frozen=True)
class StrategyPlan:
    """
    Result of plan_strategy.

    Attributes
    ----------
    total_months : int
        Longest individual payoff (when the whole plan is done).
    total_interest : float
        Sum of interest across debts.
    payoff_schedule : tuple of PayoffScheduleEntry
        One entry per debt, in strategy order.
    monthly_cost : float
        Sum of minimum payments plus the additional payment applied.
    converged : bool
        False if any debt hit the simulation cap.
    """
    strategy: PayoffStrategy
    total_months: int = 0
    total_interest: float = 0.0
    payoff_schedule: Tuple[PayoffScheduleEntry, ...] = ()
    monthly_cost: float = 0.0
    total_debt: float = 0.0
    converged: bool = True


@dataclass(frozen=True)
class DebtAnalytics:
    """Portfolio-level debt summary; zeroed when there are no debts."""
    total_debt: float = 0.0
    average_interest_rate: float = 0.0
    monthly_payments: float = 0.0
    debts_by_type: Dict[str, float] = field(default_factory=dict)
    payoff_projection: Dict[str, StrategyPlan] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------

class PayoffStrategy(str, Enum):
    """
    Debt prioritization strategy.

    - AVALANCHE: highest rate first; ties → larger balance first
    - SNOWBALL: smallest balance first; ties → higher rate first
    - MINIMUM: due-date order (undated debts last)
    """
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    MINIMUM = "minimum"

    @classmethod
    def parse(cls, value: Union["PayoffStrategy", str]) -> "PayoffStrategy":
        """Accept an enum member or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValidationError(f"strategy must be one of {valid}, got {value!r}") from None

    def sort_key(self) -> Callable[[DebtRecord], tuple]:
        return _SORT_KEYS[self]

    def order(self, debts: Sequence[DebtRecord]) -> List[DebtRecord]:
        """Return *debts* in this strategy's priority order (stable)."""
        return sorted(debts, key=self.sort_key())


_SORT_KEYS: Dict[PayoffStrategy, Callable[[DebtRecord], tuple]] = {
    PayoffStrategy.AVALANCHE: lambda d: (-d.annual_rate_percent, -d.balance),
    PayoffStrategy.SNOWBALL: lambda d: (d.balance, -d.annual_rate_percent),
    PayoffStrategy.MINIMUM: lambda d: (d.due_date is None, d.due_date or date.min),
}


# ---------------------------------------------------------------------------
# Single-debt simulation
# ---------------------------------------------------------------------------

def _run_payoff(
    balance: float,
    annual_rate_percent: float,
    payment: float,
    max_months: int,
) -> Iterator[PayoffMonth]:
    """
    Yield simulated months until the balance is zero or the cap is hit.

    Interest accrues on the opening balance each month. Principal paid is
    ``min(balance, payment - interest)`` floored at zero, so the balance
    never increases even when the payment does not cover interest.
    """
    monthly_rate = periodic_rate(annual_rate_percent)
    remaining = float(balance)
    month = 0
    while remaining > 0 and month < max_months:
        interest = remaining * monthly_rate
        principal_paid = max(0.0, min(remaining, payment - interest))
        remaining -= principal_paid
        month += 1
        yield PayoffMonth(
            month=month,
            payment=min(payment, principal_paid + interest),
            principal=principal_paid,
            interest=interest,
            balance=remaining,
            unpaid_interest=max(0.0, interest - payment),
        )


def simulate_payoff(
    balance: float,
    annual_rate_percent: float,
    minimum_payment: float,
    extra_payment: float = 0.0,
    *,
    max_months: Optional[int] = None,
) -> PayoffResult:
    """
    Simulate paying off one debt with a fixed monthly payment.

    Parameters
    ----------
    balance : float
        Opening balance (>= 0).
    annual_rate_percent : float
        Nominal APR in percent (>= 0).
    minimum_payment, extra_payment : float
        Monthly payment is their sum (each >= 0).
    max_months : int, optional
        Simulation cap; defaults to PayoffConfig().max_months (360).

    Returns
    -------
    PayoffResult
        ``total_interest`` includes interest accrued in months where the
        payment fell short of it. ``converged`` is False when the cap was
        reached with a balance still outstanding.

    Examples
    --------
    >>> simulate_payoff(1_000, 0.0, 100).months
    10
    >>> simulate_payoff(10_000, 24.0, 100).converged   # payment < interest
    False
    """
    check_non_negative("balance", balance)
    check_non_negative("annual_rate_percent", annual_rate_percent)
    check_non_negative("minimum_payment", minimum_payment)
    check_non_negative("extra_payment", extra_payment)
    cap = PayoffConfig().max_months if max_months is None else int(max_months)

    payment = float(minimum_payment) + float(extra_payment)
    months = 0
    total_interest = 0.0
    remaining = float(balance)
    for row in _run_payoff(balance, annual_rate_percent, payment, cap):
        months = row.month
        total_interest += row.interest
        remaining = row.balance

    converged = remaining <= 0
    if not converged:
        logger.warning(
            "Payoff did not converge within {} months (balance {:.2f}, payment {:.2f})",
            cap, remaining, payment,
        )
    return PayoffResult(
        months=months,
        total_interest=total_interest,
        monthly_payment=payment,
        converged=converged,
        remaining_balance=max(0.0, remaining),
    )


def payoff_timeline(
    balance: float,
    annual_rate_percent: float,
    minimum_payment: float,
    extra_payment: float = 0.0,
    *,
    max_months: Optional[int] = None,
    output: Literal["list", "dataframe"] = "list",
) -> List[PayoffMonth] | pd.DataFrame:
    """
    Month-by-month rows of the same simulation as :func:`simulate_payoff`.

    Returns a list of PayoffMonth, or a DataFrame indexed by month when
    ``output="dataframe"``.
    """
    if output not in ("list", "dataframe"):
        raise ValueError(f"output must be 'list' or 'dataframe', got: {output}")
    check_non_negative("balance", balance)
    check_non_negative("annual_rate_percent", annual_rate_percent)
    check_non_negative("minimum_payment", minimum_payment)
    check_non_negative("extra_payment", extra_payment)
    cap = PayoffConfig().max_months if max_months is None else int(max_months)

    rows = list(_run_payoff(balance, annual_rate_percent, minimum_payment + extra_payment, cap))
    if output == "dataframe":
        columns = ["month", "payment", "principal", "interest", "balance", "unpaid_interest"]
        return pd.DataFrame([asdict(r) for r in rows], columns=columns).set_index("month")
    return rows


def split_payment(debt: DebtRecord, amount: float, on: date) -> PaymentEvent:
    """
    Split a payment into interest and principal portions.

    Interest is one month of interest on the current balance, capped at the
    payment; the rest reduces principal.

    Raises
    ------
    DomainError
        If amount <= 0 or the amount exceeds balance plus this month's interest.
    """
    if amount <= 0:
        raise DomainError(f"payment amount must be > 0, got {amount}")
    interest = debt.balance * debt.monthly_rate
    payoff_amount = debt.balance + interest
    if amount > payoff_amount + MONEY_TOLERANCE:
        raise DomainError(
            f"payment {amount:,.2f} exceeds payoff amount {payoff_amount:,.2f} "
            f"for debt {debt.id!r}"
        )
    interest_portion = min(interest, amount)
    return PaymentEvent(
        debt_id=debt.id,
        amount=float(amount),
        date=on,
        principal_portion=float(amount) - interest_portion,
        interest_portion=interest_portion,
    )


# ---------------------------------------------------------------------------
# Multi-debt planning
# ---------------------------------------------------------------------------

def plan_strategy(
    debts: Sequence[DebtRecord],
    strategy: Union[PayoffStrategy, str],
    additional_payment: float = 0.0,
    *,
    config: Optional[PayoffConfig] = None,
) -> StrategyPlan:
    """
    Plan payoff of several debts under a strategy.

    Parameters
    ----------
    debts : sequence of DebtRecord
        Debts to plan. Empty input returns the zeroed plan.
    strategy : PayoffStrategy or str
        "avalanche", "snowball" or "minimum".
    additional_payment : float, default 0.0
        Extra monthly amount added to EVERY debt's simulation independently
        (see module docstring), whatever the strategy.
    config : PayoffConfig, optional
        Simulation cap.

    Returns
    -------
    StrategyPlan

    Raises
    ------
    DomainError
        If additional_payment is negative.
    """
    strategy = PayoffStrategy.parse(strategy)
    if additional_payment < 0:
        raise DomainError(f"additional_payment must be >= 0, got {additional_payment}")
    if not debts:
        return StrategyPlan(strategy=strategy)

    cfg = config or PayoffConfig()
    extra = float(additional_payment)

    entries: List[PayoffScheduleEntry] = []
    total_months = 0
    total_interest = 0.0
    for debt in strategy.order(debts):
        result = simulate_payoff(
            debt.balance,
            debt.annual_rate_percent,
            debt.minimum_payment,
            extra,
            max_months=cfg.max_months,
        )
        total_months = max(total_months, result.months)
        total_interest += result.total_interest
        entries.append(
            PayoffScheduleEntry(
                debt_id=debt.id,
                name=debt.name,
                annual_rate_percent=debt.annual_rate_percent,
                balance=debt.balance,
                months=result.months,
                total_interest=result.total_interest,
                monthly_payment=result.monthly_payment,
                converged=result.converged,
            )
        )

    logger.debug(
        "Planned {} debts with {} strategy: {} months, {:.2f} interest",
        len(entries), strategy.value, total_months, total_interest,
    )
    return StrategyPlan(
        strategy=strategy,
        total_months=total_months,
        total_interest=total_interest,
        payoff_schedule=tuple(entries),
        monthly_cost=sum(d.minimum_payment for d in debts) + extra,
        total_debt=sum(d.balance for d in debts),
        converged=all(e.converged for e in entries),
    )


def get_analytics(
    debts: Sequence[DebtRecord],
    *,
    config: Optional[PayoffConfig] = None,
) -> DebtAnalytics:
    """
    Summarize a debt portfolio.

    The average interest rate is balance-weighted (0 when all balances are
    zero). The payoff projection runs each strategy with no additional
    payment. Empty input returns the zeroed DebtAnalytics.
    """
    if not debts:
        return DebtAnalytics()

    total_debt = float(sum(d.balance for d in debts))
    weighted = sum(d.balance * d.annual_rate_percent for d in debts)
    average_rate = weighted / total_debt if total_debt > 0 else 0.0

    by_type: Dict[str, float] = {}
    for d in debts:
        by_type[d.debt_type] = by_type.get(d.debt_type, 0.0) + d.balance

    projection = {
        s.value: plan_strategy(debts, s, 0.0, config=config)
        for s in (PayoffStrategy.MINIMUM, PayoffStrategy.SNOWBALL, PayoffStrategy.AVALANCHE)
    }

    return DebtAnalytics(
        total_debt=total_debt,
        average_interest_rate=average_rate,
        monthly_payments=float(sum(d.minimum_payment for d in debts)),
        debts_by_type=by_type,
        payoff_projection=projection,
    )
