"""
Custom exceptions for FinProj.

Purpose
-------
Provides a unified exception hierarchy for consistent error handling
across all FinProj modules. All exceptions inherit from FinProjError,
enabling catch-all handling when needed.

Exception Hierarchy
-------------------
FinProjError (base)
├── ConfigurationError - Invalid configuration or settings
├── ValidationError - Malformed record values (also a ValueError)
└── DomainError - Business-rule violations (also a ValueError)

Non-convergence is not an exception: the rate solver returns None and
payoff simulations return ``converged=False``.

Usage
-----
>>> from finproj.exceptions import DomainError
>>>
>>> raise DomainError("principal must be > 0, got 0")
>>>
>>> # Catch all FinProj exceptions
>>> try:
...     goal = apply_contribution(goal, 5_000)
... except FinProjError as e:
...     print(f"FinProj error: {e}")
"""


class FinProjError(Exception):
    """
    Base exception for all FinProj errors.

    Examples
    --------
    >>> try:
    ...     plan = plan_strategy(debts, "avalanche", -10)
    ... except FinProjError as e:
    ...     logger.error(f"Planning failed: {e}")
    """
    pass


class ConfigurationError(FinProjError):
    """
    Invalid configuration or settings.

    Raised when engine configuration is invalid, such as:
    - A config file that cannot be parsed
    - Incompatible parameter combinations
    - Missing required sections in a records file

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "records file must contain a JSON object, got list"
    ... )
    """
    pass


class ValidationError(FinProjError, ValueError):
    """
    Malformed record values.

    Raised when a record fails structural validation, such as:
    - Negative balances or amounts
    - Unknown income frequency or transaction type
    - Valuation history dates that are not strictly increasing

    Examples
    --------
    >>> raise ValidationError(
    ...     f"frequency must be one of one_time, monthly, quarterly, yearly, "
    ...     f"got {frequency!r}"
    ... )
    """
    pass


class DomainError(FinProjError, ValueError):
    """
    Business-rule violation.

    Raised synchronously and never retried, for example:
    - A goal contribution that would exceed the target amount
    - Zero or negative loan principal
    - Inconsistent rate/time inputs (e.g. a zero-year loan)
    - A date range whose start is after its end

    Examples
    --------
    >>> raise DomainError(
    ...     f"Contribution of {amount:,.2f} exceeds target: "
    ...     f"{goal.remaining_amount():,.2f} remaining"
    ... )
    """
    pass
