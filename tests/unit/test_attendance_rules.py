from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace

from hrms.services.hr.attendance_service import (
    CLOCK_IN_REMINDER,
    CLOCK_OUT_REMINDER,
    calculate_total_break_hours,
    calculate_worked_hours,
    due_reminder,
)
from hrms.services.hr.leave_service import count_leave_days
from hrms.utils.shift_utils import get_expected_hours, get_shift_end_time, is_cross_midnight_shift

# 2025-03-03 is a Monday
MONDAY = date(2025, 3, 3)


def employee(start=time(9, 0), end=time(18, 0), working_days=None):
    return SimpleNamespace(
        working_hours_start=start,
        working_hours_end=end,
        working_days=working_days or [1, 2, 3, 4, 5],
    )


def record(clock_in=None, clock_out=None):
    return SimpleNamespace(clock_in=clock_in, clock_out=clock_out)


def on_monday(hour, minute):
    return datetime(2025, 3, 3, hour, minute)


class TestBreakHours:
    def test_sums_closed_breaks(self):
        breaks = [
            SimpleNamespace(pause_time=on_monday(12, 0), resume_time=on_monday(12, 30)),
            SimpleNamespace(pause_time=on_monday(15, 0), resume_time=on_monday(15, 15)),
        ]
        assert calculate_total_break_hours(breaks) == Decimal("0.75")

    def test_open_break_ignored(self):
        breaks = [SimpleNamespace(pause_time=on_monday(12, 0), resume_time=None)]
        assert calculate_total_break_hours(breaks) == 0


class TestWorkedHours:
    def test_breaks_subtracted_and_rounded(self):
        worked = calculate_worked_hours(on_monday(9, 0), on_monday(17, 20), Decimal("0.5"))
        assert worked == Decimal("7.83")

    def test_never_negative(self):
        assert calculate_worked_hours(on_monday(9, 0), on_monday(9, 30), Decimal("1")) == Decimal("0.00")


class TestReminders:
    def test_clock_in_reminder_before_shift(self):
        # 09:00 start, 15 minute lead -> target 08:45
        assert due_reminder(employee(), None, on_monday(8, 45)) == CLOCK_IN_REMINDER
        assert due_reminder(employee(), None, on_monday(8, 52)) == CLOCK_IN_REMINDER

    def test_no_clock_in_reminder_when_already_in(self):
        assert due_reminder(employee(), record(clock_in=on_monday(8, 30)), on_monday(8, 45)) is None

    def test_outside_window(self):
        assert due_reminder(employee(), None, on_monday(10, 0)) is None

    def test_clock_out_reminder_near_end(self):
        rec = record(clock_in=on_monday(9, 0))
        assert due_reminder(employee(), rec, on_monday(18, 5)) == CLOCK_OUT_REMINDER

    def test_no_clock_out_reminder_when_already_out(self):
        rec = record(clock_in=on_monday(9, 0), clock_out=on_monday(17, 55))
        assert due_reminder(employee(), rec, on_monday(18, 0)) is None

    def test_no_clock_out_reminder_without_clock_in(self):
        assert due_reminder(employee(), None, on_monday(18, 0)) is None

    def test_non_working_day(self):
        saturday = datetime(2025, 3, 8, 8, 45)
        assert due_reminder(employee(), None, saturday) is None

    def test_missing_window_uses_defaults(self):
        assert due_reminder(employee(start=None, end=None), None, on_monday(8, 45)) == CLOCK_IN_REMINDER

    def test_window_wraps_midnight(self):
        # 00:10 start -> target 23:55 the previous evening
        assert due_reminder(employee(start=time(0, 10), end=time(8, 0), working_days=[1, 2, 3, 4, 5, 6, 7]),
                            None, on_monday(0, 0)) == CLOCK_IN_REMINDER


class TestShiftHelpers:
    def test_cross_midnight_detection(self):
        assert is_cross_midnight_shift(time(22, 0), time(6, 0))
        assert not is_cross_midnight_shift(time(9, 0), time(18, 0))

    def test_expected_hours(self):
        assert get_expected_hours(time(9, 0), time(18, 0)) == Decimal("9")
        assert get_expected_hours(time(14, 0), time(1, 0)) == Decimal("11")

    def test_shift_end_rolls_to_next_day(self):
        end = get_shift_end_time(on_monday(22, 5), time(22, 0), time(6, 0))
        assert end == datetime(2025, 3, 4, 6, 0)


class TestLeaveDays:
    def test_inclusive(self):
        assert count_leave_days(date(2025, 3, 3), date(2025, 3, 3)) == 1
        assert count_leave_days(date(2025, 3, 3), date(2025, 3, 7)) == 5
