# finproj/goals.py
"""
Savings goal projection module.

Purpose
-------
Tracks progress toward savings goals, computes the monthly contribution
needed to reach each target on time, applies contributions, and
summarizes a set of goals.

Lifecycle
---------
- create_goal / update_goal enforce the strict invariant relative to a
  reference day ``today``:
      target_amount > current_amount   and   target_date > today
  Violations raise DomainError; values are never clamped.
- apply_contribution may raise current_amount up to (never above) the
  target. Reaching the target marks the goal achieved and stamps
  ``completed_at`` once; later zero contributions leave it unchanged.

Required contribution
---------------------
    months   = max(1, (target.year − today.year)·12 + (target.month − today.month))
    required = (target_amount − current_amount) / months        (0 if achieved)

Design Principles
-----------------
- Immutable records: every operation returns a new GoalRecord
  (dataclasses.replace); inputs are never mutated
- Injectable clock: every date-dependent call takes ``today``
- Calendar months, not 30-day blocks

Example
-------
>>> from datetime import date
>>> from finproj.goals import create_goal, apply_contribution
>>> goal = create_goal(50_000, date(2025, 12, 31), current_amount=10_000,
...                    today=date(2025, 1, 15))
>>> goal.progress_percent(), goal.remaining_amount()
(20.0, 40000.0)
>>> goal.required_monthly_contribution(today=date(2025, 1, 15))
3636.36...
>>> done = apply_contribution(goal, 40_000)
>>> done.is_achieved(), done.completed_at is not None
(True, True)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .exceptions import DomainError, ValidationError
from .utils import add_months, check_non_negative, months_between

__all__ = [
    "GoalRecord",
    "GoalProjection",
    "CategorySummary",
    "GoalMilestone",
    "GoalAnalytics",
    "create_goal",
    "update_goal",
    "apply_contribution",
    "project_goal",
    "goal_analytics",
]


# ---------------------------------------------------------------------------
# Goal Record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GoalRecord:
    """
    Savings goal.

    Parameters
    ----------
    target_amount : float
        Amount to reach, must be > 0.
    target_date : datetime.date
        Deadline.
    current_amount : float, default 0.0
        Saved so far, 0 <= current_amount <= target_amount.
    monthly_contribution : float, default 0.0
        Planned monthly saving; drives the on-track flag.
    name, category : str
        Display name and grouping key.
    created_at : datetime.date, optional
        Creation day; needed for time-based expected progress.
    completed_at : datetime.datetime, optional
        Set once when the target is reached.

    Notes
    -----
    Construction only checks structural bounds. The temporal invariant is
    enforced by create_goal / update_goal because it depends on ``today``.
    """
    target_amount: float
    target_date: date
    current_amount: float = 0.0
    monthly_contribution: float = 0.0
    name: str = ""
    category: str = "other"
    created_at: Optional[date] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        if self.target_amount <= 0:
            raise ValidationError(f"target_amount must be > 0, got {self.target_amount}")
        check_non_negative("current_amount", self.current_amount)
        check_non_negative("monthly_contribution", self.monthly_contribution)
        if self.current_amount > self.target_amount:
            raise ValidationError(
                f"current_amount {self.current_amount:,.2f} exceeds "
                f"target_amount {self.target_amount:,.2f}"
            )

    def progress_percent(self) -> float:
        """current / target × 100."""
        return float(self.current_amount / self.target_amount * 100.0)

    def remaining_amount(self) -> float:
        return float(self.target_amount - self.current_amount)

    def is_achieved(self) -> bool:
        return self.current_amount >= self.target_amount

    def months_remaining(self, today: Optional[date] = None) -> int:
        """Whole calendar months until target_date, at least 1."""
        today = today or date.today()
        return max(1, months_between(today, self.target_date))

    def required_monthly_contribution(self, today: Optional[date] = None) -> float:
        """
        Monthly amount needed to reach the target by target_date.

        Returns 0.0 for an achieved goal. A target date in the past or in
        the current month counts as one month away.
        """
        if self.is_achieved():
            return 0.0
        return self.remaining_amount() / self.months_remaining(today)

    def __repr__(self) -> str:
        return (
            f"GoalRecord(name={self.name!r}, {self.current_amount:,.0f}/"
            f"{self.target_amount:,.0f} by {self.target_date.isoformat()})"
        )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GoalProjection:
    """Point-in-time projection of one goal."""
    name: str
    progress_percent: float
    remaining_amount: float
    months_remaining: int
    required_monthly_contribution: float
    on_track: bool
    projected_completion: Optional[date] = None


@dataclass(frozen=True)
class CategorySummary:
    count: int = 0
    total_saved: float = 0.0
    total_target: float = 0.0


@dataclass(frozen=True)
class GoalMilestone:
    """Open goal ordered by deadline in GoalAnalytics.next_milestones."""
    name: str
    category: str
    target_date: date
    remaining_amount: float
    required_monthly_contribution: float


@dataclass(frozen=True)
class GoalAnalytics:
    """
    Summary of a set of goals; zeroed for an empty set.

    ``average_progress`` is total_saved / total_target × 100. Open goals
    are split into on-track and at-risk by comparing progress with the
    share of time elapsed between created_at and target_date.
    """
    total_saved: float = 0.0
    total_target: float = 0.0
    achieved_goals: int = 0
    on_track_goals: int = 0
    at_risk_goals: int = 0
    average_progress: float = 0.0
    goals_by_category: Dict[str, CategorySummary] = field(default_factory=dict)
    next_milestones: Tuple[GoalMilestone, ...] = ()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_invariant(goal: GoalRecord, today: date) -> None:
    """Raise DomainError unless target > current and target_date > today."""
    if goal.target_amount <= goal.current_amount:
        raise DomainError(
            f"target_amount {goal.target_amount:,.2f} must exceed "
            f"current_amount {goal.current_amount:,.2f}"
        )
    if goal.target_date <= today:
        raise DomainError(
            f"target_date {goal.target_date.isoformat()} must be after "
            f"{today.isoformat()}"
        )


_INVARIANT_FIELDS = frozenset({"target_amount", "target_date", "current_amount"})


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def create_goal(
    target_amount: float,
    target_date: date,
    current_amount: float = 0.0,
    monthly_contribution: float = 0.0,
    name: str = "",
    category: str = "other",
    *,
    today: Optional[date] = None,
) -> GoalRecord:
    """
    Create a goal after checking the strict invariant.

    ``created_at`` is set to *today*.

    Raises
    ------
    ValidationError
        Negative amounts or a non-positive target.
    DomainError
        target_amount <= current_amount, or target_date not after today.
    """
    today = today or date.today()
    try:
        goal = GoalRecord(
            target_amount=target_amount,
            target_date=target_date,
            current_amount=current_amount,
            monthly_contribution=monthly_contribution,
            name=name,
            category=category,
            created_at=today,
        )
    except ValidationError as exc:
        if current_amount > target_amount > 0:
            raise DomainError(str(exc)) from exc
        raise
    _check_invariant(goal, today)
    return goal


def update_goal(goal: GoalRecord, *, today: Optional[date] = None, **changes) -> GoalRecord:
    """
    Return a copy of *goal* with *changes* applied.

    Changing target_amount, target_date or current_amount re-checks the
    strict invariant against *today*.

    Raises
    ------
    ValidationError
        Unknown fields or invalid field values.
    DomainError
        The updated goal breaks the strict invariant.

    Examples
    --------
    >>> update_goal(goal, target_amount=60_000, today=date(2025, 3, 1))
    """
    known = {f.name for f in fields(GoalRecord)}
    unknown = set(changes) - known
    if unknown:
        raise ValidationError(f"unknown goal fields: {sorted(unknown)}")

    try:
        updated = replace(goal, **changes)
    except ValidationError as exc:
        target = changes.get("target_amount", goal.target_amount)
        current = changes.get("current_amount", goal.current_amount)
        if current > target > 0:
            raise DomainError(str(exc)) from exc
        raise
    if _INVARIANT_FIELDS & set(changes):
        _check_invariant(updated, today or date.today())
    return updated


def apply_contribution(
    goal: GoalRecord,
    amount: float,
    at: Optional[datetime] = None,
) -> GoalRecord:
    """
    Add *amount* to the goal's current amount.

    Parameters
    ----------
    goal : GoalRecord
    amount : float
        Contribution, must be >= 0.
    at : datetime, optional
        Completion timestamp to record if this contribution reaches the
        target; ``datetime.now()`` when None.

    Raises
    ------
    DomainError
        If amount is negative or the contribution exceeds the target.
    """
    if amount < 0:
        raise DomainError(f"contribution must be >= 0, got {amount}")
    new_amount = goal.current_amount + amount
    if new_amount > goal.target_amount:
        raise DomainError(
            f"contribution of {amount:,.2f} exceeds target: "
            f"{goal.current_amount:,.2f} + {amount:,.2f} > {goal.target_amount:,.2f}"
        )

    completed_at = goal.completed_at
    if new_amount >= goal.target_amount and completed_at is None:
        completed_at = at or datetime.now()
        logger.info("Goal {!r} achieved at {}", goal.name, completed_at.isoformat())
    return replace(goal, current_amount=new_amount, completed_at=completed_at)


def _expected_progress(goal: GoalRecord, today: date) -> float:
    """Share of the created_at → target_date window elapsed, in percent."""
    if goal.created_at is None:
        return 0.0
    total_days = (goal.target_date - goal.created_at).days
    if total_days <= 0:
        return 100.0
    elapsed = (today - goal.created_at).days
    return min(100.0, max(0.0, elapsed / total_days * 100.0))


def project_goal(goal: GoalRecord, today: Optional[date] = None) -> GoalProjection:
    """
    Snapshot of a goal's trajectory.

    ``on_track`` is True when the planned monthly contribution covers the
    required one (always True once achieved). ``projected_completion`` is
    the month the planned contribution reaches the target, None when
    nothing is being contributed.
    """
    today = today or date.today()
    required = goal.required_monthly_contribution(today)
    remaining = goal.remaining_amount()

    if goal.is_achieved():
        completion = (goal.completed_at.date() if goal.completed_at else today)
    elif goal.monthly_contribution > 0:
        completion = add_months(today, math.ceil(remaining / goal.monthly_contribution))
    else:
        completion = None

    return GoalProjection(
        name=goal.name,
        progress_percent=goal.progress_percent(),
        remaining_amount=remaining,
        months_remaining=goal.months_remaining(today),
        required_monthly_contribution=required,
        on_track=goal.monthly_contribution >= required,
        projected_completion=completion,
    )


def goal_analytics(goals: Sequence[GoalRecord], today: Optional[date] = None) -> GoalAnalytics:
    """
    Summarize several goals.

    Examples
    --------
    >>> stats = goal_analytics(goals, today=date(2025, 6, 1))
    >>> stats.achieved_goals, stats.at_risk_goals
    """
    if not goals:
        return GoalAnalytics()

    today = today or date.today()
    achieved = on_track = at_risk = 0
    by_category: Dict[str, CategorySummary] = {}
    milestones: List[GoalMilestone] = []

    for goal in goals:
        summary = by_category.get(goal.category, CategorySummary())
        by_category[goal.category] = CategorySummary(
            count=summary.count + 1,
            total_saved=summary.total_saved + goal.current_amount,
            total_target=summary.total_target + goal.target_amount,
        )

        if goal.is_achieved():
            achieved += 1
            continue

        if goal.progress_percent() >= _expected_progress(goal, today):
            on_track += 1
        else:
            at_risk += 1
        milestones.append(
            GoalMilestone(
                name=goal.name,
                category=goal.category,
                target_date=goal.target_date,
                remaining_amount=goal.remaining_amount(),
                required_monthly_contribution=goal.required_monthly_contribution(today),
            )
        )

    total_saved = float(sum(g.current_amount for g in goals))
    total_target = float(sum(g.target_amount for g in goals))
    return GoalAnalytics(
        total_saved=total_saved,
        total_target=total_target,
        achieved_goals=achieved,
        on_track_goals=on_track,
        at_risk_goals=at_risk,
        average_progress=total_saved / total_target * 100.0,
        goals_by_category=by_category,
        next_milestones=tuple(sorted(milestones, key=lambda m: m.target_date)),
    )
