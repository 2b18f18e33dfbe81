"""
Serialization module for FinProj records and results.

Purpose
-------
Reads records documents handed over by the persistence layer and writes
engine results as JSON, so projections can be stored, diffed and shared.

Supports:
- Building engine records (DebtRecord, AssetRecord, GoalRecord, ...) from
  plain dictionaries, validated through the pydantic configs
- Loading a full records document (debts, assets, liabilities,
  investments, goals, incomes, expenses)
- Converting any result dataclass to JSON-compatible data

Design Principles
-----------------
- Type-safe: Uses Pydantic configs for validation
- Human-readable: JSON with ISO dates and enum values
- Backward compatible: Validates schema versions

Example
-------
>>> from pathlib import Path
>>> from finproj.serialization import load_records, save_result
>>> from finproj.debt import get_analytics
>>>
>>> records = load_records(Path("records.json"))
>>> analytics = get_analytics(records.debts)
>>> save_result(analytics, Path("out/debt_analytics.json"))
"""

from __future__ import annotations

import json
import warnings
from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Type, TypeVar, Union

import numpy as np
import pydantic
from pydantic import BaseModel

from .config import (
    AssetConfig,
    DebtConfig,
    GoalConfig,
    IncomeConfig,
    InvestmentConfig,
    LiabilityConfig,
    RecordsConfig,
)
from .debt import DebtRecord, PaymentEvent
from .exceptions import ConfigurationError, ValidationError
from .goals import GoalRecord
from .income import IncomeRecord
from .investment import InvestmentRecord, InvestmentTransaction
from .networth import AssetRecord, LiabilityRecord, ValuationPoint
from .types import AssetDict, DebtDict, GoalDict, IncomeDict, InvestmentDict, LiabilityDict

__all__ = [
    "SCHEMA_VERSION",
    "Records",
    "debt_from_dict",
    "asset_from_dict",
    "liability_from_dict",
    "investment_from_dict",
    "goal_from_dict",
    "income_from_dict",
    "load_records",
    "to_jsonable",
    "save_result",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"

_M = TypeVar("_M", bound=BaseModel)


def _validate(model: Type[_M], data: Mapping[str, Any]) -> _M:
    """Validate *data* with a pydantic config, re-raised as ValidationError."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"invalid {model.__name__}: {exc}") from exc


def _check_schema_version(data: Mapping[str, Any]) -> None:
    schema_version = data.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"Records schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

def _debt(cfg: DebtConfig) -> DebtRecord:
    return DebtRecord(
        id=cfg.id,
        balance=cfg.balance,
        annual_rate_percent=cfg.annual_rate_percent,
        minimum_payment=cfg.minimum_payment,
        due_date=cfg.due_date,
        name=cfg.name,
        debt_type=cfg.debt_type,
        initial_balance=cfg.initial_balance,
        payments=tuple(
            PaymentEvent(
                debt_id=p.debt_id,
                amount=p.amount,
                date=p.date,
                principal_portion=p.principal_portion,
                interest_portion=p.interest_portion,
            )
            for p in cfg.payments
        ),
    )


def _asset(cfg: AssetConfig) -> AssetRecord:
    return AssetRecord(
        id=cfg.id,
        value=cfg.value,
        value_history=tuple(ValuationPoint(p.date, p.value) for p in cfg.value_history),
        name=cfg.name,
        category=cfg.category,
    )


def _liability(cfg: LiabilityConfig) -> LiabilityRecord:
    return LiabilityRecord(id=cfg.id, amount=cfg.amount, name=cfg.name, category=cfg.category)


def _investment(cfg: InvestmentConfig) -> InvestmentRecord:
    return InvestmentRecord(
        id=cfg.id,
        symbol=cfg.symbol,
        current_price=cfg.current_price,
        transactions=tuple(
            InvestmentTransaction(t.type, t.shares, t.date, t.price_per_share)
            for t in cfg.transactions
        ),
        investment_type=cfg.investment_type,
        average_cost=cfg.average_cost,
    )


def _goal(cfg: GoalConfig) -> GoalRecord:
    return GoalRecord(
        target_amount=cfg.target_amount,
        target_date=cfg.target_date,
        current_amount=cfg.current_amount,
        monthly_contribution=cfg.monthly_contribution,
        name=cfg.name,
        category=cfg.category,
        created_at=cfg.created_at,
        completed_at=cfg.completed_at,
    )


def _income(cfg: IncomeConfig) -> IncomeRecord:
    return IncomeRecord(
        amount=cfg.amount,
        frequency=cfg.frequency,
        date=cfg.date,
        income_type=cfg.income_type,
        description=cfg.description,
    )


def debt_from_dict(data: DebtDict) -> DebtRecord:
    """
    Create a DebtRecord from its dictionary representation.

    Parameters
    ----------
    data : dict
        Debt fields; dates as ISO strings or date objects.

    Returns
    -------
    DebtRecord

    Raises
    ------
    ValidationError
        If the data fails config or record validation.
    """
    return _debt(_validate(DebtConfig, data))


def asset_from_dict(data: AssetDict) -> AssetRecord:
    """Create an AssetRecord (with valuation history) from a dictionary."""
    return _asset(_validate(AssetConfig, data))


def liability_from_dict(data: LiabilityDict) -> LiabilityRecord:
    return _liability(_validate(LiabilityConfig, data))


def investment_from_dict(data: InvestmentDict) -> InvestmentRecord:
    """Create an InvestmentRecord (with transaction log) from a dictionary."""
    return _investment(_validate(InvestmentConfig, data))


def goal_from_dict(data: GoalDict) -> GoalRecord:
    """
    Create a GoalRecord from a dictionary.

    Only structural bounds are checked; stored goals may already be
    achieved or past their target date.
    """
    return _goal(_validate(GoalConfig, data))


def income_from_dict(data: IncomeDict) -> IncomeRecord:
    return _income(_validate(IncomeConfig, data))


# ---------------------------------------------------------------------------
# Records document
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Records:
    """Engine records loaded from one JSON document."""
    schema_version: str = SCHEMA_VERSION
    debts: Tuple[DebtRecord, ...] = ()
    assets: Tuple[AssetRecord, ...] = ()
    liabilities: Tuple[LiabilityRecord, ...] = ()
    investments: Tuple[InvestmentRecord, ...] = ()
    goals: Tuple[GoalRecord, ...] = ()
    incomes: Tuple[IncomeRecord, ...] = ()
    expenses: Tuple[IncomeRecord, ...] = ()


def load_records(path: Union[str, Path]) -> Records:
    """
    Load a records document from a JSON file.

    Parameters
    ----------
    path : str or Path
        Input file path.

    Returns
    -------
    Records

    Raises
    ------
    ConfigurationError
        If the document is not a JSON object.
    ValidationError
        If any record is malformed.

    Warns
    -----
    UserWarning
        If the document's schema_version differs from SCHEMA_VERSION.

    Examples
    --------
    >>> records = load_records("records.json")
    >>> len(records.debts)
    """
    with open(path, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"records file must contain a JSON object, got {type(data).__name__}"
        )
    _check_schema_version(data)
    config = _validate(RecordsConfig, data)

    return Records(
        schema_version=config.schema_version,
        debts=tuple(_debt(c) for c in config.debts),
        assets=tuple(_asset(c) for c in config.assets),
        liabilities=tuple(_liability(c) for c in config.liabilities),
        investments=tuple(_investment(c) for c in config.investments),
        goals=tuple(_goal(c) for c in config.goals),
        incomes=tuple(_income(c) for c in config.incomes),
        expenses=tuple(_income(c) for c in config.expenses),
    )


# ---------------------------------------------------------------------------
# Result Serialization
# ---------------------------------------------------------------------------

def to_jsonable(obj: Any) -> Any:
    """
    Convert a result object to JSON-compatible data.

    Dataclasses become dicts, enums their values, dates ISO strings,
    tuples lists and numpy scalars/arrays plain Python numbers/lists.
    Mapping keys are stringified.

    Examples
    --------
    >>> to_jsonable(AmortizationRow(1, 100.0, 90.0, 10.0, 910.0))
    {'period': 1, 'payment': 100.0, 'principal': 90.0, 'interest': 10.0, 'balance': 910.0}
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Mapping):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    return obj


def save_result(result: Any, path: Union[str, Path]) -> None:
    """
    Save a result object (or list of them) to a JSON file.

    The file holds ``{"schema_version", "result_type", "result"}``.

    Examples
    --------
    >>> save_result(plan_strategy(debts, "avalanche"), Path("plan.json"))
    """
    path = Path(path)
    payload: Dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "result_type": type(result).__name__,
        "result": to_jsonable(result),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)
