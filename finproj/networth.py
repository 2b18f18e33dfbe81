"""
Net-worth reconstruction module for FinProj.

Purpose
-------
Rebuilds a monthly net-worth time series from asset valuation histories,
static liabilities, investment transaction logs and debt payment records,
and summarizes the current position.

Valuation rules at a date d
---------------------------
- Asset: most recent ValuationPoint with ``date <= d``; the asset's current
  value when no such point exists.
- Liability: static current amount (no history is kept).
- Investment: net shares held at d times the CURRENT price. Historical
  prices are not tracked, so past points reflect today's prices applied to
  past positions. ``price_lookup(symbol)``, when supplied, is called once
  per investment per call and overrides ``current_price``.
- Debt: ``initial_balance`` minus the principal portions of payments dated
  ``<= d``.

    net_worth = assets + investments − liabilities − debts

Example
-------
>>> from datetime import date
>>> from finproj.networth import AssetRecord, ValuationPoint, reconstruct
>>> home = AssetRecord(id=1, value=310_000, value_history=[
...     ValuationPoint(date(2024, 1, 1), 300_000),
...     ValuationPoint(date(2024, 7, 1), 310_000),
... ])
>>> points = reconstruct([home], [], [], [], date(2024, 1, 1), date(2024, 12, 1))
>>> len(points), points[0].assets, points[-1].assets
(12, 300000.0, 310000.0)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd
from loguru import logger

from .config import NetWorthConfig
from .constants import MONTHS_PER_YEAR
from .debt import DebtRecord
from .exceptions import DomainError, ValidationError
from .investment import InvestmentRecord, shares_at
from .utils import add_months, check_non_negative, month_range

__all__ = [
    "ValuationPoint",
    "AssetRecord",
    "LiabilityRecord",
    "NetWorthPoint",
    "NetWorthAnalytics",
    "PriceLookup",
    "reconstruct",
    "net_worth_analytics",
    "to_dataframe",
]

RecordId = Union[int, str]
PriceLookup = Callable[[str], float]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValuationPoint:
    """Point-in-time value of an asset."""
    date: date
    value: float

    def __post_init__(self):
        check_non_negative("value", self.value)


@dataclass(frozen=True)
class AssetRecord:
    """
    Asset with its valuation history.

    ``value_history`` dates must be strictly increasing.
    """
    id: RecordId
    value: float
    value_history: Tuple[ValuationPoint, ...] = ()
    name: str = ""
    category: str = "other"

    def __post_init__(self):
        check_non_negative("value", self.value)
        history = tuple(self.value_history)
        for prev, cur in zip(history, history[1:]):
            if cur.date <= prev.date:
                raise ValidationError(
                    f"asset {self.id!r}: value_history dates must be strictly increasing "
                    f"({prev.date.isoformat()} then {cur.date.isoformat()})"
                )
        object.__setattr__(self, "value_history", history)

    def value_at(self, on: date) -> float:
        """Most recent valuation on or before *on*, else the current value."""
        latest = None
        for point in self.value_history:
            if point.date > on:
                break
            latest = point
        return float(latest.value if latest is not None else self.value)


@dataclass(frozen=True)
class LiabilityRecord:
    """Static liability (mortgage escrow, personal IOU, ...)."""
    id: RecordId
    amount: float
    name: str = ""
    category: str = "other"

    def __post_init__(self):
        check_non_negative("amount", self.amount)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NetWorthPoint:
    """Net-worth breakdown at one date."""
    date: date
    assets: float
    liabilities: float
    investments: float
    debts: float
    net_worth: float


@dataclass(frozen=True)
class NetWorthAnalytics:
    """
    Current net-worth summary with trend.

    Attributes
    ----------
    total_assets : float
        Asset values plus investment market value.
    total_liabilities : float
        Liabilities plus outstanding debt.
    asset_allocation : dict
        Value per asset category; investments under "investments".
    liability_breakdown : dict
        Amount per liability category and per debt type.
    monthly_change, yearly_change : float
        Percent change of net worth against the point one and twelve months
        earlier; 0.0 when unavailable or when the base is 0.
    """
    total_assets: float = 0.0
    total_liabilities: float = 0.0
    net_worth: float = 0.0
    asset_allocation: Dict[str, float] = field(default_factory=dict)
    liability_breakdown: Dict[str, float] = field(default_factory=dict)
    monthly_change: float = 0.0
    yearly_change: float = 0.0


# ---------------------------------------------------------------------------
# Valuation helpers
# ---------------------------------------------------------------------------

def _debt_outstanding(debt: DebtRecord, on: date) -> float:
    paid = sum(p.principal_portion for p in debt.payments if p.date <= on)
    return float(debt.initial_balance - paid)


def _resolve_prices(
    investments: Sequence[InvestmentRecord],
    price_lookup: Optional[PriceLookup],
) -> List[float]:
    if price_lookup is None:
        return [float(inv.current_price) for inv in investments]
    return [float(price_lookup(inv.symbol)) for inv in investments]


def _point_at(
    on: date,
    assets: Sequence[AssetRecord],
    liabilities: Sequence[LiabilityRecord],
    investments: Sequence[InvestmentRecord],
    prices: Sequence[float],
    debts: Sequence[DebtRecord],
) -> NetWorthPoint:
    asset_total = sum(a.value_at(on) for a in assets)
    liability_total = sum(float(l.amount) for l in liabilities)
    investment_total = sum(shares_at(inv, on) * px for inv, px in zip(investments, prices))
    debt_total = sum(_debt_outstanding(d, on) for d in debts)
    return NetWorthPoint(
        date=on,
        assets=float(asset_total),
        liabilities=float(liability_total),
        investments=float(investment_total),
        debts=float(debt_total),
        net_worth=float(asset_total + investment_total - liability_total - debt_total),
    )


def _series(
    start: date,
    end: date,
    assets: Sequence[AssetRecord],
    liabilities: Sequence[LiabilityRecord],
    investments: Sequence[InvestmentRecord],
    prices: Sequence[float],
    debts: Sequence[DebtRecord],
) -> List[NetWorthPoint]:
    dates = month_range(start, end)
    logger.debug(
        "Reconstructing net worth {} to {} ({} points)",
        start.isoformat(), end.isoformat(), len(dates),
    )
    return [_point_at(d, assets, liabilities, investments, prices, debts) for d in dates]


def _percent_change(current: float, base: float) -> float:
    if base == 0:
        return 0.0
    return (current - base) / abs(base) * 100.0


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def reconstruct(
    assets: Sequence[AssetRecord],
    liabilities: Sequence[LiabilityRecord],
    investments: Sequence[InvestmentRecord],
    debts: Sequence[DebtRecord],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    *,
    price_lookup: Optional[PriceLookup] = None,
    today: Optional[date] = None,
    config: Optional[NetWorthConfig] = None,
) -> List[NetWorthPoint]:
    """
    Monthly net-worth series from *start_date* to *end_date* inclusive.

    Parameters
    ----------
    assets, liabilities, investments, debts : sequences of records
        Any of them may be empty.
    start_date, end_date : date, optional
        Point k is ``start_date + k months`` (day clamped to month end),
        emitted while ``<= end_date``. ``end_date`` defaults to *today*;
        ``start_date`` defaults to ``history_months`` (12) months before the
        end, giving 13 points.
    price_lookup : callable, optional
        ``symbol -> price``; called exactly once per investment.
    today : date, optional
        Reference date; ``date.today()`` when None.
    config : NetWorthConfig, optional
        Default history window.

    Returns
    -------
    list[NetWorthPoint]
        Strictly increasing dates.

    Raises
    ------
    DomainError
        If start_date > end_date.
    """
    cfg = config or NetWorthConfig()
    end = end_date or today or date.today()
    start = start_date or add_months(end, -cfg.history_months)
    if start > end:
        raise DomainError(
            f"start_date {start.isoformat()} is after end_date {end.isoformat()}"
        )

    prices = _resolve_prices(investments, price_lookup)
    return _series(start, end, assets, liabilities, investments, prices, debts)


def net_worth_analytics(
    assets: Sequence[AssetRecord],
    liabilities: Sequence[LiabilityRecord],
    investments: Sequence[InvestmentRecord],
    debts: Sequence[DebtRecord],
    *,
    price_lookup: Optional[PriceLookup] = None,
    today: Optional[date] = None,
) -> NetWorthAnalytics:
    """
    Summarize net worth as of *today* with allocation and trend.

    The trend compares the last point of the default trailing history with
    the point one month and twelve months earlier.
    """
    today = today or date.today()
    prices = _resolve_prices(investments, price_lookup)
    start = add_months(today, -NetWorthConfig().history_months)
    history = _series(start, today, assets, liabilities, investments, prices, debts)
    current = history[-1]

    allocation: Dict[str, float] = {}
    for asset in assets:
        allocation[asset.category] = allocation.get(asset.category, 0.0) + asset.value_at(today)
    if investments:
        allocation["investments"] = current.investments

    breakdown: Dict[str, float] = {}
    for liability in liabilities:
        breakdown[liability.category] = breakdown.get(liability.category, 0.0) + liability.amount
    for debt in debts:
        breakdown[debt.debt_type] = breakdown.get(debt.debt_type, 0.0) + _debt_outstanding(debt, today)

    monthly = 0.0
    if len(history) >= 2:
        monthly = _percent_change(current.net_worth, history[-2].net_worth)
    yearly = 0.0
    if len(history) >= MONTHS_PER_YEAR + 1:
        yearly = _percent_change(current.net_worth, history[-(MONTHS_PER_YEAR + 1)].net_worth)

    return NetWorthAnalytics(
        total_assets=current.assets + current.investments,
        total_liabilities=current.liabilities + current.debts,
        net_worth=current.net_worth,
        asset_allocation=allocation,
        liability_breakdown=breakdown,
        monthly_change=monthly,
        yearly_change=yearly,
    )


def to_dataframe(points: Sequence[NetWorthPoint]) -> pd.DataFrame:
    """
    Date-indexed DataFrame with one column per NetWorthPoint field.

    Examples
    --------
    >>> df = to_dataframe(points)
    >>> df["net_worth"].plot()
    """
    columns = ["assets", "liabilities", "investments", "debts", "net_worth"]
    if not points:
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="date"))
    df = pd.DataFrame([asdict(p) for p in points])
    df["date"] = pd.to_datetime(df["date"])
    return df.set_index("date")[columns]
