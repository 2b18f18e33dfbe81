"""
Rate-of-return solver for FinProj.

Purpose
-------
Finds the per-period discount rate that makes the net present value of an
investment's cash flows zero (internal rate of return) using Newton-Raphson.

Mathematical Framework
----------------------
For an initial outlay P, interim flows cf_i at period indices i, and a
terminal value V received one period after the last interim flow k:

    NPV(r)  = −P + Σ cf_i / (1+r)^i + V / (1+r)^(k+1)
    NPV'(r) = −Σ i·cf_i / (1+r)^(i+1) − (k+1)·V / (1+r)^(k+2)

    r_{n+1} = r_n − NPV(r_n) / NPV'(r_n)

Convergence is declared when |r_{n+1} − r_n| < tolerance.

Non-convergence
---------------
Not an error. solve_rate() returns None when:
- the iteration budget is exhausted,
- NPV'(r) == 0 at any iterate (aborts before dividing by zero),
- an iterate leaves the domain (1 + r <= 0) or becomes non-finite.
Callers must treat None as "undeterminable", never as 0.

Example
-------
>>> from finproj.rates import solve_rate, CashFlow
>>> solve_rate(1_000, [], 1_100)          # one period, +10%
0.1
>>> solve_rate(1_000, [CashFlow(100, 1), CashFlow(100, 2)], 1_100)
0.1000...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from .config import RateSolverConfig
from .constants import MONTHS_PER_YEAR
from .exceptions import DomainError, ValidationError

__all__ = [
    "CashFlow",
    "CashFlowSeries",
    "npv",
    "npv_derivative",
    "solve_rate",
    "annualize_rate",
]


@dataclass(frozen=True)
class CashFlow:
    """Interim cash flow received at an integer period index (>= 1)."""
    amount: float
    period_index: int

    def __post_init__(self):
        if int(self.period_index) != self.period_index or self.period_index < 1:
            raise ValidationError(
                f"period_index must be an integer >= 1, got {self.period_index}"
            )


CashFlowSeries = Sequence[Union[CashFlow, float]]


def _as_arrays(flows: CashFlowSeries) -> Tuple[np.ndarray, np.ndarray]:
    """Split flows into (amounts, periods); bare floats map to periods 1..k."""
    if not flows:
        return np.zeros(0, dtype=float), np.zeros(0, dtype=float)

    if all(isinstance(f, CashFlow) for f in flows):
        amounts = np.array([f.amount for f in flows], dtype=float)
        periods = np.array([f.period_index for f in flows], dtype=float)
        if np.any(np.diff(periods) <= 0):
            raise ValidationError(
                f"cash flow periods must be strictly increasing, got {periods.astype(int).tolist()}"
            )
        return amounts, periods

    if any(isinstance(f, CashFlow) for f in flows):
        raise ValidationError("cash flows must be all CashFlow objects or all plain amounts")

    amounts = np.asarray(flows, dtype=float)
    return amounts, np.arange(1, amounts.size + 1, dtype=float)


def npv(
    rate: float,
    initial_outlay: float,
    interim_cash_flows: CashFlowSeries,
    terminal_value: float,
) -> float:
    """Net present value at per-period *rate* (see module docstring)."""
    amounts, periods = _as_arrays(interim_cash_flows)
    k = periods[-1] if periods.size else 0.0
    base = 1.0 + rate
    value = -float(initial_outlay)
    value += float(np.sum(amounts / np.power(base, periods)))
    value += float(terminal_value) / base ** (k + 1)
    return value


def npv_derivative(
    rate: float,
    initial_outlay: float,
    interim_cash_flows: CashFlowSeries,
    terminal_value: float,
) -> float:
    """First derivative of :func:`npv` with respect to *rate*."""
    amounts, periods = _as_arrays(interim_cash_flows)
    k = periods[-1] if periods.size else 0.0
    base = 1.0 + rate
    d = -float(np.sum(periods * amounts / np.power(base, periods + 1)))
    d -= (k + 1) * float(terminal_value) / base ** (k + 2)
    return d


def solve_rate(
    initial_outlay: float,
    interim_cash_flows: CashFlowSeries,
    terminal_value: float,
    *,
    guess: Optional[float] = None,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[RateSolverConfig] = None,
) -> Optional[float]:
    """
    Solve for the per-period internal rate of return.

    Parameters
    ----------
    initial_outlay : float
        Amount invested at t=0. Must be > 0.
    interim_cash_flows : sequence of CashFlow or float
        Flows received before the terminal value. Plain floats are placed
        at periods 1..k in order.
    terminal_value : float
        Value received one period after the last interim flow. Must be >= 0.
    guess, tolerance, max_iterations : optional
        Newton-Raphson settings. Explicit arguments win over *config*,
        which wins over the module defaults (0.10, 1e-5, 100).
    config : RateSolverConfig, optional
        Solver settings bundle.

    Returns
    -------
    float or None
        Rate per period (0.05 = 5%), or None when undeterminable.

    Raises
    ------
    DomainError
        If initial_outlay <= 0 or terminal_value < 0.
    """
    if initial_outlay <= 0:
        raise DomainError(f"initial_outlay must be > 0, got {initial_outlay}")
    if terminal_value < 0:
        raise DomainError(f"terminal_value must be >= 0, got {terminal_value}")

    cfg = config or RateSolverConfig()
    rate = cfg.guess if guess is None else float(guess)
    tol = cfg.tolerance if tolerance is None else float(tolerance)
    budget = cfg.max_iterations if max_iterations is None else int(max_iterations)

    # Validate once up front so malformed series fail loudly, not as None
    _as_arrays(interim_cash_flows)

    for iteration in range(budget):
        if not np.isfinite(rate) or 1.0 + rate <= 0.0:
            logger.warning("Rate solver left the domain at iteration {} (rate={})", iteration, rate)
            return None

        value = npv(rate, initial_outlay, interim_cash_flows, terminal_value)
        slope = npv_derivative(rate, initial_outlay, interim_cash_flows, terminal_value)
        if slope == 0.0:
            logger.warning("Rate solver aborted: zero NPV derivative at rate={}", rate)
            return None

        new_rate = rate - value / slope
        if abs(new_rate - rate) < tol:
            logger.debug("Rate solver converged in {} iterations: {:.6f}", iteration + 1, new_rate)
            return float(new_rate)
        rate = new_rate

    logger.warning("Rate solver did not converge within {} iterations", budget)
    return None


def annualize_rate(rate_per_period: float, periods_per_year: int = MONTHS_PER_YEAR) -> float:
    """Compound a per-period rate to an annual one: (1 + r) ** n - 1."""
    return float((1.0 + rate_per_period) ** periods_per_year - 1.0)
