"""
Unit tests for goals.py module.

Tests GoalRecord, the create/update/contribute lifecycle, projections and
goal analytics.
"""

from dataclasses import FrozenInstanceError
from datetime import date, datetime

import pytest

from finproj.exceptions import DomainError, ValidationError
from finproj.goals import (
    CategorySummary,
    GoalAnalytics,
    GoalRecord,
    apply_contribution,
    create_goal,
    goal_analytics,
    project_goal,
    update_goal,
)


# ============================================================================
# GOALRECORD TESTS
# ============================================================================

class TestGoalRecord:
    """Test GoalRecord metrics and validation."""

    def test_progress_and_remaining(self, car_goal):
        """10k saved of 50k."""
        assert car_goal.progress_percent() == 20.0
        assert car_goal.remaining_amount() == 40_000
        assert not car_goal.is_achieved()

    @pytest.mark.parametrize("current,target", [
        (0, 1_000),
        (333.33, 1_000),
        (12_345.67, 98_765.43),
    ])
    def test_progress_and_remaining_add_up(self, current, target):
        goal = GoalRecord(target, date(2026, 1, 1), current_amount=current)
        total = goal.progress_percent() + goal.remaining_amount() / target * 100
        assert total == pytest.approx(100.0)

    def test_required_monthly_contribution(self, car_goal, today):
        """11 calendar months from mid-January to end of December."""
        assert car_goal.months_remaining(today) == 11
        assert car_goal.required_monthly_contribution(today) == pytest.approx(40_000 / 11)

    def test_past_target_date_counts_as_one_month(self, car_goal):
        assert car_goal.months_remaining(date(2026, 3, 1)) == 1
        assert car_goal.required_monthly_contribution(date(2026, 3, 1)) == pytest.approx(40_000)

    def test_achieved_requires_nothing(self, today):
        goal = GoalRecord(5_000, date(2025, 6, 1), current_amount=5_000)
        assert goal.is_achieved()
        assert goal.required_monthly_contribution(today) == 0.0

    @pytest.mark.parametrize("target", [0, -100])
    def test_non_positive_target_raises(self, target):
        with pytest.raises(ValidationError, match="target_amount"):
            GoalRecord(target, date(2026, 1, 1))

    def test_negative_current_raises(self):
        with pytest.raises(ValidationError, match="current_amount"):
            GoalRecord(1_000, date(2026, 1, 1), current_amount=-1)

    def test_current_above_target_raises(self):
        with pytest.raises(ValidationError, match="exceeds"):
            GoalRecord(1_000, date(2026, 1, 1), current_amount=1_001)

    def test_frozen(self, car_goal):
        with pytest.raises(FrozenInstanceError):
            car_goal.current_amount = 0


# ============================================================================
# LIFECYCLE TESTS
# ============================================================================

class TestCreateGoal:
    """Test create_goal()."""

    def test_valid_goal(self, today):
        goal = create_goal(50_000, date(2025, 12, 31), current_amount=10_000,
                           name="Car", today=today)

        assert goal.created_at == today
        assert goal.progress_percent() == 20.0
        assert goal.remaining_amount() == 40_000

    def test_target_date_not_after_today_raises(self, today):
        with pytest.raises(DomainError, match="target_date"):
            create_goal(1_000, today, today=today)

    def test_current_equal_to_target_raises(self, today):
        with pytest.raises(DomainError, match="must exceed"):
            create_goal(1_000, date(2026, 1, 1), current_amount=1_000, today=today)

    def test_current_above_target_raises_domain_error(self, today):
        with pytest.raises(DomainError):
            create_goal(1_000, date(2026, 1, 1), current_amount=2_000, today=today)

    def test_negative_amount_raises_validation_error(self, today):
        with pytest.raises(ValidationError):
            create_goal(1_000, date(2026, 1, 1), monthly_contribution=-5, today=today)


class TestUpdateGoal:
    """Test update_goal()."""

    def test_returns_new_record(self, car_goal, today):
        updated = update_goal(car_goal, target_amount=60_000, today=today)

        assert updated.target_amount == 60_000
        assert car_goal.target_amount == 50_000

    def test_invariant_rechecked(self, car_goal, today):
        with pytest.raises(DomainError):
            update_goal(car_goal, target_date=date(2024, 12, 1), today=today)

    def test_non_invariant_field_skips_check(self, car_goal):
        """Renaming an overdue goal is allowed."""
        renamed = update_goal(car_goal, name="New car", today=date(2026, 6, 1))
        assert renamed.name == "New car"

    def test_target_below_saved_raises_domain_error(self, car_goal, today):
        """10k already saved, so a 5k target breaks the invariant."""
        with pytest.raises(DomainError, match="exceeds"):
            update_goal(car_goal, target_amount=5_000, today=today)

    def test_negative_target_still_validation_error(self, car_goal, today):
        with pytest.raises(ValidationError, match="target_amount"):
            update_goal(car_goal, target_amount=-1, today=today)

    def test_unknown_field_raises(self, car_goal, today):
        with pytest.raises(ValidationError, match="unknown"):
            update_goal(car_goal, colour="red", today=today)


class TestApplyContribution:
    """Test apply_contribution()."""

    def test_adds_amount(self, car_goal):
        updated = apply_contribution(car_goal, 5_000)

        assert updated.current_amount == 15_000
        assert updated.completed_at is None
        assert car_goal.current_amount == 10_000

    def test_reaching_target_marks_achieved(self, car_goal, log_messages):
        at = datetime(2025, 11, 30, 12, 0)
        done = apply_contribution(car_goal, 40_000, at=at)

        assert done.is_achieved()
        assert done.completed_at == at
        assert any(level == "INFO" and "achieved" in msg for level, msg in log_messages)

    def test_completed_at_set_once(self, car_goal):
        at = datetime(2025, 11, 30)
        done = apply_contribution(car_goal, 40_000, at=at)
        again = apply_contribution(done, 0, at=datetime(2026, 1, 1))

        assert again.completed_at == at

    def test_exceeding_target_raises(self, car_goal):
        with pytest.raises(DomainError, match="exceeds target"):
            apply_contribution(car_goal, 40_001)

    def test_negative_contribution_raises(self, car_goal):
        with pytest.raises(DomainError):
            apply_contribution(car_goal, -1)


# ============================================================================
# PROJECTION TESTS
# ============================================================================

class TestProjectGoal:
    """Test project_goal()."""

    def test_behind_plan(self, car_goal, today):
        """2,000/month falls short of the 3,636 needed."""
        p = project_goal(car_goal, today)

        assert p.name == "Car"
        assert p.progress_percent == 20.0
        assert p.months_remaining == 11
        assert p.required_monthly_contribution == pytest.approx(40_000 / 11)
        assert p.on_track is False
        assert p.projected_completion == date(2026, 9, 15)

    def test_enough_contribution_is_on_track(self, car_goal, today):
        p = project_goal(update_goal(car_goal, monthly_contribution=4_000), today)

        assert p.on_track is True
        assert p.projected_completion == date(2025, 11, 15)

    def test_no_contribution_has_no_completion(self, today):
        goal = GoalRecord(1_000, date(2026, 1, 1))
        assert project_goal(goal, today).projected_completion is None

    def test_achieved_goal(self, car_goal, today):
        done = apply_contribution(car_goal, 40_000, at=datetime(2025, 3, 1, 9, 30))
        p = project_goal(done, today)

        assert p.on_track is True
        assert p.required_monthly_contribution == 0.0
        assert p.projected_completion == date(2025, 3, 1)


class TestGoalAnalytics:
    """Test goal_analytics()."""

    @pytest.fixture
    def goals(self, car_goal):
        return [
            car_goal,
            GoalRecord(5_000, date(2025, 6, 1), current_amount=5_000,
                       name="Fund", category="emergency"),
            GoalRecord(10_000, date(2025, 6, 30), name="Trip", category="travel",
                       created_at=date(2024, 6, 30)),
        ]

    def test_empty(self, today):
        assert goal_analytics([], today) == GoalAnalytics()

    def test_totals(self, goals, today):
        stats = goal_analytics(goals, today)

        assert stats.total_saved == 15_000
        assert stats.total_target == 65_000
        assert stats.average_progress == pytest.approx(15_000 / 65_000 * 100)

    def test_status_counts(self, goals, today):
        """Trip is over half way through its window with nothing saved."""
        stats = goal_analytics(goals, today)

        assert stats.achieved_goals == 1
        assert stats.on_track_goals == 1
        assert stats.at_risk_goals == 1

    def test_categories_include_achieved_goals(self, goals, today):
        stats = goal_analytics(goals, today)

        assert set(stats.goals_by_category) == {"purchase", "emergency", "travel"}
        assert stats.goals_by_category["emergency"] == CategorySummary(1, 5_000, 5_000)

    def test_milestones_open_goals_by_date(self, goals, today):
        stats = goal_analytics(goals, today)
        assert [m.name for m in stats.next_milestones] == ["Trip", "Car"]

    def test_goal_without_created_at_is_on_track(self, today):
        goal = GoalRecord(1_000, date(2026, 1, 1))
        assert goal_analytics([goal], today).on_track_goals == 1
