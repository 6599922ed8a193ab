from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo

from hrms.core.config import settings

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December"
]


def company_timezone() -> tzinfo:
    return ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """Current wall-clock time in the company timezone."""
    return datetime.now(company_timezone())


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Express ``value`` in the company timezone.

    Naive values (e.g. read back from SQLite) are taken to be company-local
    already.
    """
    tz = tz or company_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def month_range(month: int, year: int) -> Tuple[date, date]:
    start = date(year, month, 1)
    if month == 12:
        end = date(year, 12, 31)
    else:
        end = date(year, month + 1, 1) - timedelta(days=1)
    return start, end


def month_name(month: int, year: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def parse_time(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(value)


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def hours_between(start: datetime, end: datetime) -> Decimal:
    return Decimal(str((end - start).total_seconds())) / Decimal(3600)


def format_time_12h(value: time) -> str:
    """09:00 -> '9:00 AM'"""
    hour12 = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{hour12}:{value.minute:02d} {suffix}"
