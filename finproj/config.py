"""
Configuration management module for FinProj.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization. Two families of models live here:

- Engine settings: solver tolerances, payoff cap, history window.
- Record configs: the validated JSON shape of records handed over by the
  persistence layer (debts, assets, goals, incomes, ...). The serialization
  module turns these into the engine's frozen dataclasses.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for records files
- Environment-aware: AppSettings reads FINPROJ_* variables and .env files
- Defaults: Sensible defaults for all parameters

Example
-------
>>> from finproj.config import RateSolverConfig, DebtConfig
>>> solver = RateSolverConfig(tolerance=1e-6)
>>> debt = DebtConfig.model_validate(
...     {"id": 1, "balance": 1000, "annual_rate_percent": 20, "minimum_payment": 50}
... )
>>> debt.model_dump_json()
"""

from __future__ import annotations

import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_HISTORY_MONTHS,
    DEFAULT_MAX_ITERS,
    DEFAULT_RATE_GUESS,
    DEFAULT_TOLERANCE,
    MAX_PAYOFF_MONTHS,
)

__all__ = [
    "RateSolverConfig",
    "PayoffConfig",
    "NetWorthConfig",
    "PaymentConfig",
    "DebtConfig",
    "ValuationPointConfig",
    "AssetConfig",
    "LiabilityConfig",
    "InvestmentTransactionConfig",
    "InvestmentConfig",
    "GoalConfig",
    "IncomeConfig",
    "RecordsConfig",
    "AppSettings",
]

RecordId = Union[int, str]


# ---------------------------------------------------------------------------
# Engine Settings
# ---------------------------------------------------------------------------

class RateSolverConfig(BaseModel):
    """
    Newton-Raphson settings for the rate-of-return solver.

    Attributes
    ----------
    guess : float
        Starting per-period rate (> -1).
    tolerance : float
        Convergence threshold on successive iterates (0 < tol <= 1e-2).
    max_iterations : int
        Iteration budget (1-10,000) before returning None.

    Examples
    --------
    >>> config = RateSolverConfig(max_iterations=50)
    >>> config.guess
    0.1
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    guess: float = Field(
        default=DEFAULT_RATE_GUESS,
        gt=-1.0,
        description="Initial per-period rate guess"
    )
    tolerance: float = Field(
        default=DEFAULT_TOLERANCE,
        gt=0.0,
        le=1e-2,
        description="Convergence tolerance"
    )
    max_iterations: int = Field(
        default=DEFAULT_MAX_ITERS,
        ge=1,
        le=10_000,
        description="Maximum Newton-Raphson iterations"
    )


class PayoffConfig(BaseModel):
    """
    Debt payoff simulation settings.

    Attributes
    ----------
    max_months : int
        Hard cap on simulated months (1-1200). Debts still open at the cap
        are reported as not converged.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_months: int = Field(
        default=MAX_PAYOFF_MONTHS,
        ge=1,
        le=1_200,
        description="Simulation cap in months"
    )


class NetWorthConfig(BaseModel):
    """
    Net-worth reconstruction settings.

    Attributes
    ----------
    history_months : int
        Trailing window used when no start date is given (1-600).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    history_months: int = Field(
        default=DEFAULT_HISTORY_MONTHS,
        ge=1,
        le=600,
        description="Default trailing history window"
    )


# ---------------------------------------------------------------------------
# Debt Records
# ---------------------------------------------------------------------------

class PaymentConfig(BaseModel):
    """Recorded payment against a debt, split into principal and interest."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    debt_id: RecordId
    amount: float = Field(gt=0, description="Total payment amount")
    date: datetime.date = Field(description="Payment date")
    principal_portion: float = Field(ge=0, description="Amount applied to principal")
    interest_portion: float = Field(ge=0, description="Amount applied to interest")


class DebtConfig(BaseModel):
    """
    Debt item as stored by the persistence layer.

    Examples
    --------
    >>> DebtConfig(id=1, name="Visa", debt_type="credit_card",
    ...            balance=1_000, annual_rate_percent=20, minimum_payment=50)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: RecordId
    name: str = Field(default="", max_length=100)
    debt_type: str = Field(default="other", max_length=50)
    balance: float = Field(ge=0, description="Current outstanding balance")
    annual_rate_percent: float = Field(ge=0, le=1_000, description="Nominal APR in percent")
    minimum_payment: float = Field(ge=0, description="Required monthly payment")
    due_date: Optional[datetime.date] = Field(default=None, description="Next due date")
    initial_balance: Optional[float] = Field(
        default=None,
        ge=0,
        description="Balance when the debt was opened (defaults to balance plus paid principal)"
    )
    payments: List[PaymentConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Asset, Liability and Investment Records
# ---------------------------------------------------------------------------

class ValuationPointConfig(BaseModel):
    """Point-in-time valuation of an asset."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    date: datetime.date
    value: float = Field(ge=0)


class AssetConfig(BaseModel):
    """Asset with its valuation history."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: RecordId
    name: str = Field(default="", max_length=100)
    category: str = Field(default="other", max_length=50)
    value: float = Field(ge=0, description="Current stored value")
    value_history: List[ValuationPointConfig] = Field(default_factory=list)

    @field_validator("value_history")
    @classmethod
    def validate_history_order(cls, v):
        """Valuation dates must be strictly increasing."""
        for prev, cur in zip(v, v[1:]):
            if cur.date <= prev.date:
                raise ValueError(
                    f"value_history dates must be strictly increasing "
                    f"({prev.date.isoformat()} then {cur.date.isoformat()})"
                )
        return v


class LiabilityConfig(BaseModel):
    """Static liability (no history)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: RecordId
    name: str = Field(default="", max_length=100)
    category: str = Field(default="other", max_length=50)
    amount: float = Field(ge=0)


class InvestmentTransactionConfig(BaseModel):
    """Buy or sell of shares in one investment."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["buy", "sell"]
    shares: float = Field(gt=0)
    date: datetime.date
    price_per_share: float = Field(default=0.0, ge=0)


class InvestmentConfig(BaseModel):
    """Investment position with its transaction log."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: RecordId
    symbol: str = Field(min_length=1, max_length=20)
    investment_type: str = Field(default="stock", max_length=50)
    current_price: float = Field(ge=0, description="Latest market price per share")
    average_cost: float = Field(default=0.0, ge=0)
    transactions: List[InvestmentTransactionConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Goals and Income
# ---------------------------------------------------------------------------

class GoalConfig(BaseModel):
    """
    Savings goal as stored by the persistence layer.

    Only structural checks happen here; the temporal invariant (target date
    in the future, target above current) is enforced by goals.create_goal.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="", max_length=100)
    category: str = Field(default="other", max_length=50)
    current_amount: float = Field(default=0.0, ge=0)
    target_amount: float = Field(gt=0)
    target_date: datetime.date
    monthly_contribution: float = Field(default=0.0, ge=0)
    created_at: Optional[datetime.date] = None
    completed_at: Optional[datetime.datetime] = None


class IncomeConfig(BaseModel):
    """Income or expense item with its recurrence."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    amount: float = Field(ge=0)
    frequency: Literal["one_time", "monthly", "quarterly", "yearly"]
    date: datetime.date
    income_type: str = Field(default="other", max_length=50)
    description: str = Field(default="", max_length=500)


class RecordsConfig(BaseModel):
    """
    Top-level records document consumed by the CLI.

    Every section is optional so one file can feed any single command.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_version: str = Field(default="0.1.0")
    debts: List[DebtConfig] = Field(default_factory=list)
    assets: List[AssetConfig] = Field(default_factory=list)
    liabilities: List[LiabilityConfig] = Field(default_factory=list)
    investments: List[InvestmentConfig] = Field(default_factory=list)
    goals: List[GoalConfig] = Field(default_factory=list)
    incomes: List[IncomeConfig] = Field(default_factory=list)
    expenses: List[IncomeConfig] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    should be prefixed with FINPROJ_ (e.g., FINPROJ_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    log_file : str, optional
        Path of a rotating log file; console only when unset

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPROJ_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise log_level."""
        return "DEBUG" if self.debug else self.log_level
