"""
Type definitions for FinProj.

Purpose
-------
TypedDict definitions for the JSON shapes exchanged with the persistence
layer and written by the CLI. The pydantic models in ``finproj.config``
validate these shapes; the TypedDicts document them for callers building
dictionaries by hand.

Usage
-----
>>> from finproj.types import DebtDict, RecordsDict
>>>
>>> debt: DebtDict = {
...     "id": 1,
...     "balance": 1_000.0,
...     "annual_rate_percent": 20.0,
...     "minimum_payment": 50.0,
... }
>>> records: RecordsDict = {"schema_version": "0.1.0", "debts": [debt]}

Type Definitions
----------------
PaymentDict, DebtDict
    Debt records with optional payment history.

ValuationPointDict, AssetDict, LiabilityDict
    Net-worth inputs.

InvestmentTransactionDict, InvestmentDict
    Investment positions with transaction logs.

GoalDict, IncomeDict
    Savings goals and income/expense items.

RecordsDict
    Top-level records document read by ``load_records``.

PlotColorsDict
    Color overrides accepted by the plotting functions.
"""

from typing import List, Union

from typing_extensions import NotRequired, TypedDict

__all__ = [
    "PaymentDict",
    "DebtDict",
    "ValuationPointDict",
    "AssetDict",
    "LiabilityDict",
    "InvestmentTransactionDict",
    "InvestmentDict",
    "GoalDict",
    "IncomeDict",
    "RecordsDict",
    "PlotColorsDict",
]

RecordId = Union[int, str]


class PaymentDict(TypedDict):
    """
    Recorded payment against a debt. Dates are ISO strings.

    Examples
    --------
    >>> p: PaymentDict = {"debt_id": 1, "amount": 100.0, "date": "2025-02-01",
    ...                   "principal_portion": 85.0, "interest_portion": 15.0}
    """

    debt_id: RecordId
    amount: float
    date: str
    principal_portion: float
    interest_portion: float


class DebtDict(TypedDict):
    """
    Debt item.

    Attributes
    ----------
    id : int or str
        Record identifier.
    balance : float
        Current outstanding balance.
    annual_rate_percent : float
        Nominal APR in percent (18.0 = 18%).
    minimum_payment : float
        Required monthly payment.
    due_date : str, optional
        Next due date (ISO); orders the minimum strategy.
    initial_balance : float, optional
        Opening balance for net-worth reconstruction; defaults to balance
        plus the principal of recorded payments.
    payments : list of PaymentDict, optional
        Recorded payments.
    """

    id: RecordId
    balance: float
    annual_rate_percent: float
    minimum_payment: float
    name: NotRequired[str]
    debt_type: NotRequired[str]
    due_date: NotRequired[str]
    initial_balance: NotRequired[float]
    payments: NotRequired[List[PaymentDict]]


class ValuationPointDict(TypedDict):
    date: str
    value: float


class AssetDict(TypedDict):
    """Asset with valuation history (dates strictly increasing)."""

    id: RecordId
    value: float
    name: NotRequired[str]
    category: NotRequired[str]
    value_history: NotRequired[List[ValuationPointDict]]


class LiabilityDict(TypedDict):
    id: RecordId
    amount: float
    name: NotRequired[str]
    category: NotRequired[str]


class InvestmentTransactionDict(TypedDict):
    type: str  # "buy" or "sell"
    shares: float
    date: str
    price_per_share: NotRequired[float]


class InvestmentDict(TypedDict):
    """Investment position; valued at current_price times net shares."""

    id: RecordId
    symbol: str
    current_price: float
    investment_type: NotRequired[str]
    average_cost: NotRequired[float]
    transactions: NotRequired[List[InvestmentTransactionDict]]


class GoalDict(TypedDict):
    """
    Savings goal.

    ``completed_at`` is an ISO datetime string, set once when the goal is
    reached.
    """

    target_amount: float
    target_date: str
    current_amount: NotRequired[float]
    monthly_contribution: NotRequired[float]
    name: NotRequired[str]
    category: NotRequired[str]
    created_at: NotRequired[str]
    completed_at: NotRequired[str]


class IncomeDict(TypedDict):
    """Income or expense item; frequency is one_time/monthly/quarterly/yearly."""

    amount: float
    frequency: str
    date: str
    income_type: NotRequired[str]
    description: NotRequired[str]


class RecordsDict(TypedDict, total=False):
    """
    Records document consumed by ``finproj.serialization.load_records``.

    Every section is optional.
    """

    schema_version: str
    debts: List[DebtDict]
    assets: List[AssetDict]
    liabilities: List[LiabilityDict]
    investments: List[InvestmentDict]
    goals: List[GoalDict]
    incomes: List[IncomeDict]
    expenses: List[IncomeDict]


class PlotColorsDict(TypedDict, total=False):
    """
    Color overrides for plotting functions.

    Attributes
    ----------
    principal : str
        Principal bars / areas. Default: "#2196F3".
    interest : str
        Interest bars / areas. Default: "#FF9800".
    balance : str
        Balance line. Default: "black".
    assets : str
        Asset (plus investments) line. Default: "#4CAF50".
    liabilities : str
        Liabilities plus debts line. Default: "#F44336".
    net_worth : str
        Net-worth line. Default: "#3F51B5".

    Examples
    --------
    >>> colors: PlotColorsDict = {"net_worth": "purple"}
    >>> plot_net_worth(points, colors=colors)
    """

    principal: str
    interest: str
    balance: str
    assets: str
    liabilities: str
    net_worth: str
