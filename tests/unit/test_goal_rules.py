from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from hrms.models.shared.enums import GoalStatus
from hrms.services.asset.asset_service import asset_code_pattern
from hrms.services.performance.goal_service import (
    UPCOMING_GOAL_REMINDER,
    URGENT_GOAL_REMINDER,
    goal_reminder_kind,
    status_for_progress,
)
from hrms.utils.employee_code import next_code

TODAY = date(2025, 3, 10)


def goal(due_in=None, status=GoalStatus.IN_PROGRESS, reminded_days_ago=None):
    last = None
    if reminded_days_ago is not None:
        last = datetime.combine(TODAY - timedelta(days=reminded_days_ago), datetime.min.time()).replace(
            hour=12, tzinfo=timezone.utc
        )
    return SimpleNamespace(
        status=status,
        due_date=TODAY + timedelta(days=due_in) if due_in is not None else None,
        last_reminder_sent=last,
    )


class TestGoalStatus:
    def test_status_follows_progress(self):
        assert status_for_progress(0) == GoalStatus.NOT_STARTED
        assert status_for_progress(1) == GoalStatus.IN_PROGRESS
        assert status_for_progress(99) == GoalStatus.IN_PROGRESS
        assert status_for_progress(100) == GoalStatus.COMPLETED


class TestGoalReminders:
    def test_no_reminder_without_due_date(self):
        assert goal_reminder_kind(goal(), TODAY) is None

    def test_completed_goals_are_skipped(self):
        assert goal_reminder_kind(goal(due_in=1, status=GoalStatus.COMPLETED), TODAY) is None

    def test_outside_window(self):
        assert goal_reminder_kind(goal(due_in=8), TODAY) is None
        assert goal_reminder_kind(goal(due_in=-1), TODAY) is None

    def test_urgent_window(self):
        assert goal_reminder_kind(goal(due_in=0), TODAY) == URGENT_GOAL_REMINDER
        assert goal_reminder_kind(goal(due_in=3), TODAY) == URGENT_GOAL_REMINDER
        assert goal_reminder_kind(goal(due_in=2, reminded_days_ago=1), TODAY) == URGENT_GOAL_REMINDER

    def test_urgent_reminder_once_a_day(self):
        assert goal_reminder_kind(goal(due_in=2, reminded_days_ago=0), TODAY) is None

    def test_upcoming_window(self):
        assert goal_reminder_kind(goal(due_in=7), TODAY) == UPCOMING_GOAL_REMINDER
        assert goal_reminder_kind(goal(due_in=5, reminded_days_ago=4), TODAY) == UPCOMING_GOAL_REMINDER

    def test_upcoming_reminder_spacing(self):
        assert goal_reminder_kind(goal(due_in=6, reminded_days_ago=3), TODAY) is None


class TestAssetCodes:
    def test_codes_numbered_per_category(self):
        pattern = asset_code_pattern("Laptop")
        assert pattern.prefix == "LAP"
        assert next_code([], pattern) == "LAP-0001"
        assert next_code(["LAP-0001", "lap-0007"], pattern) == "LAP-0008"
