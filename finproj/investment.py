"""
Investment position helpers for FinProj.

Purpose
-------
Values investment positions from their transaction logs. Used by the
net-worth reconstructor (shares held at a past date) and by the CLI for a
portfolio summary.

Key components
--------------
- InvestmentTransaction / InvestmentRecord:
    Buy/sell log and the position it belongs to. A log that would sell more
    shares than are held at any point is rejected at construction.

- shares_at:
    Net shares (buys minus sells) dated on or before a given day.

- position_metrics / investment_metrics:
    Market value, cost basis and unrealized gain per position and in total.

- portfolio_allocation:
    Percent of market value per investment type.

Pricing
-------
Positions are priced at ``current_price``; when it is 0 (no quote yet) the
average cost is used instead so an unquoted position neither vanishes nor
shows a fake loss.

Example
-------
>>> from datetime import date
>>> from finproj.investment import InvestmentRecord, InvestmentTransaction, shares_at
>>> inv = InvestmentRecord(
...     id=1, symbol="VTI", current_price=250.0,
...     transactions=[
...         InvestmentTransaction("buy", 10, date(2024, 1, 15), 200.0),
...         InvestmentTransaction("sell", 4, date(2024, 6, 1), 230.0),
...     ],
... )
>>> shares_at(inv, date(2024, 3, 1)), shares_at(inv)
(10.0, 6.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Literal, Optional, Sequence, Tuple, Union

from .exceptions import ValidationError
from .utils import check_non_negative

__all__ = [
    "InvestmentTransaction",
    "InvestmentRecord",
    "PositionMetrics",
    "InvestmentAnalytics",
    "shares_at",
    "position_metrics",
    "investment_metrics",
    "portfolio_allocation",
]

RecordId = Union[int, str]
TransactionType = Literal["buy", "sell"]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvestmentTransaction:
    """Buy or sell of ``shares`` at ``price_per_share`` on ``date``."""
    type: TransactionType
    shares: float
    date: date
    price_per_share: float = 0.0

    def __post_init__(self):
        if self.type not in ("buy", "sell"):
            raise ValidationError(f"transaction type must be 'buy' or 'sell', got {self.type!r}")
        if self.shares <= 0:
            raise ValidationError(f"shares must be > 0, got {self.shares}")
        check_non_negative("price_per_share", self.price_per_share)

    @property
    def signed_shares(self) -> float:
        return self.shares if self.type == "buy" else -self.shares


@dataclass(frozen=True)
class InvestmentRecord:
    """
    Investment position with its transaction log.

    Parameters
    ----------
    id : int or str
        Record identifier.
    symbol : str
        Ticker passed to a ``price_lookup`` callable.
    current_price : float
        Latest known price per share (>= 0).
    transactions : sequence of InvestmentTransaction
        Stored sorted by date; same-day transactions keep input order.
    investment_type : str
        Allocation bucket ("stock", "bond", "crypto", ...).
    average_cost : float
        Average purchase price per share (>= 0).
    """
    id: RecordId
    symbol: str
    current_price: float
    transactions: Tuple[InvestmentTransaction, ...] = ()
    investment_type: str = "stock"
    average_cost: float = 0.0

    def __post_init__(self):
        if not self.symbol:
            raise ValidationError("symbol must be a non-empty string")
        check_non_negative("current_price", self.current_price)
        check_non_negative("average_cost", self.average_cost)

        ordered = tuple(sorted(self.transactions, key=lambda t: t.date))
        object.__setattr__(self, "transactions", ordered)

        held = 0.0
        for tx in ordered:
            held += tx.signed_shares
            if held < -1e-9:
                raise ValidationError(
                    f"{self.symbol}: cannot sell more shares than owned "
                    f"(on {tx.date.isoformat()})"
                )

    @property
    def shares(self) -> float:
        """Shares currently held."""
        return shares_at(self)

    @property
    def effective_price(self) -> float:
        """current_price, falling back to average_cost when unquoted."""
        return self.current_price if self.current_price > 0 else self.average_cost


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PositionMetrics:
    """Valuation of one position."""
    symbol: str
    shares: float
    price: float
    average_cost: float
    value: float
    cost_basis: float
    gain: float
    gain_percent: float


@dataclass(frozen=True)
class InvestmentAnalytics:
    """Portfolio totals; zeroed when there are no investments."""
    total_value: float = 0.0
    total_cost: float = 0.0
    total_gain: float = 0.0
    total_gain_percent: float = 0.0
    allocation_by_type: Dict[str, float] = field(default_factory=dict)
    performance_by_symbol: Tuple[PositionMetrics, ...] = ()


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def shares_at(investment: InvestmentRecord, on: Optional[date] = None) -> float:
    """
    Net shares held at the end of day *on* (all transactions when None).
    """
    return float(sum(
        tx.signed_shares
        for tx in investment.transactions
        if on is None or tx.date <= on
    ))


def position_metrics(investment: InvestmentRecord) -> PositionMetrics:
    """Market value, cost basis and unrealized gain of one position."""
    shares = investment.shares
    price = investment.effective_price
    value = shares * price
    cost = shares * investment.average_cost
    gain = value - cost
    return PositionMetrics(
        symbol=investment.symbol,
        shares=shares,
        price=price,
        average_cost=investment.average_cost,
        value=value,
        cost_basis=cost,
        gain=gain,
        gain_percent=gain / cost * 100.0 if cost > 0 else 0.0,
    )


def portfolio_allocation(investments: Sequence[InvestmentRecord]) -> Dict[str, float]:
    """
    Percent of total market value per ``investment_type``.

    Returns an empty mapping when the portfolio has no value.
    """
    by_type: Dict[str, float] = {}
    for inv in investments:
        value = inv.shares * inv.effective_price
        by_type[inv.investment_type] = by_type.get(inv.investment_type, 0.0) + value

    total = sum(by_type.values())
    if total <= 0:
        return {}
    return {k: v / total * 100.0 for k, v in by_type.items()}


def investment_metrics(investments: Sequence[InvestmentRecord]) -> InvestmentAnalytics:
    """
    Aggregate position metrics.

    ``performance_by_symbol`` is sorted by absolute gain, best first.
    """
    if not investments:
        return InvestmentAnalytics()

    positions: List[PositionMetrics] = [position_metrics(inv) for inv in investments]
    total_value = sum(p.value for p in positions)
    total_cost = sum(p.cost_basis for p in positions)
    total_gain = total_value - total_cost

    return InvestmentAnalytics(
        total_value=total_value,
        total_cost=total_cost,
        total_gain=total_gain,
        total_gain_percent=total_gain / total_cost * 100.0 if total_cost > 0 else 0.0,
        allocation_by_type=portfolio_allocation(investments),
        performance_by_symbol=tuple(sorted(positions, key=lambda p: p.gain, reverse=True)),
    )
