"""Work shift helpers, including shifts that cross midnight (e.g. 14:00-01:00)."""
from datetime import datetime, time, timedelta
from decimal import Decimal

from hrms.utils.date_time import minutes_of_day

MINUTES_PER_DAY = 24 * 60


def is_cross_midnight_shift(work_start: time, work_end: time) -> bool:
    return minutes_of_day(work_end) <= minutes_of_day(work_start)


def get_expected_hours(work_start: time, work_end: time) -> Decimal:
    """Scheduled length of the window in hours; cross-midnight windows wrap."""
    start_minutes = minutes_of_day(work_start)
    end_minutes = minutes_of_day(work_end)
    if end_minutes > start_minutes:
        return Decimal(end_minutes - start_minutes) / Decimal(60)
    return Decimal(MINUTES_PER_DAY - start_minutes + end_minutes) / Decimal(60)


def get_scheduled_start(clock_in: datetime, work_start: time) -> datetime:
    """Same calendar day as ``clock_in``, at the start hour and minute."""
    return clock_in.replace(hour=work_start.hour, minute=work_start.minute, second=0, microsecond=0)


def get_shift_end_time(clock_in: datetime, work_start: time, work_end: time) -> datetime:
    end_time = clock_in.replace(hour=work_end.hour, minute=work_end.minute, second=0, microsecond=0)
    if is_cross_midnight_shift(work_start, work_end):
        end_time += timedelta(days=1)
    return end_time
