"""
Monthly attendance aggregation.

Raw punch rows are folded into one record per employee: days worked, hours,
late arrivals and overtime, judged against each employee's working-hours
window. Hours stay ``Decimal`` throughout; rounding happens only in the
summary.
"""
from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from hrms.core.config import settings
from hrms.schemas.report.attendance_report_schema import (
    AttendanceReportRecord,
    AttendanceReportSummary,
    AttendanceRow,
)
from hrms.utils.date_time import company_timezone, to_local
from hrms.utils.shift_utils import get_expected_hours, get_scheduled_start

ZERO = Decimal("0")
TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class AttendancePolicy:
    late_grace_minutes: int = 1
    overtime_threshold_minutes: int = 0
    timezone: Optional[tzinfo] = None

    @classmethod
    def from_settings(cls) -> "AttendancePolicy":
        return cls(
            late_grace_minutes=settings.LATE_GRACE_MINUTES,
            overtime_threshold_minutes=settings.OVERTIME_THRESHOLD_MINUTES,
            timezone=company_timezone(),
        )


def or_zero(value: Optional[Decimal]) -> Decimal:
    """Optional numeric column read as zero when missing."""
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_late_minutes(clock_in: datetime, work_start: time, policy: AttendancePolicy) -> int:
    """Whole minutes late past the scheduled start, or 0 within the grace period."""
    if policy.timezone is not None:
        clock_in = to_local(clock_in, policy.timezone)
    scheduled_start = get_scheduled_start(clock_in, work_start)
    if clock_in <= scheduled_start:
        return 0
    minutes = int((clock_in - scheduled_start).total_seconds() // 60)
    return minutes if minutes > policy.late_grace_minutes else 0


def calculate_overtime_hours(total_hours: Decimal, work_start: time, work_end: time,
                             policy: AttendancePolicy) -> Decimal:
    expected = get_expected_hours(work_start, work_end)
    threshold = Decimal(policy.overtime_threshold_minutes) / Decimal(60)
    if total_hours > expected + threshold:
        return total_hours - expected
    return ZERO


def _new_record(row: AttendanceRow) -> AttendanceReportRecord:
    emp = row.employee
    return AttendanceReportRecord(
        employee_id=row.employee_id,
        employee_name=f"{emp.first_name} {emp.last_name}",
        employee_code=emp.employee_code,
        department=emp.department.name if emp.department else "-",
        working_hours_start=emp.working_hours_start,
        working_hours_end=emp.working_hours_end,
    )


def fold_row(record: AttendanceReportRecord, row: AttendanceRow, policy: AttendancePolicy) -> None:
    start = row.employee.working_hours_start
    end = row.employee.working_hours_end

    record.total_days += 1
    record.total_hours += or_zero(row.total_hours)

    if row.clock_in is not None and start is not None:
        late = calculate_late_minutes(row.clock_in, start, policy)
        if late:
            record.late_arrivals += 1
            record.total_late_minutes += late

    if row.total_hours is not None and start is not None and end is not None:
        record.total_overtime_hours += calculate_overtime_hours(row.total_hours, start, end, policy)


def aggregate_attendance(rows: Iterable[AttendanceRow], policy: Optional[AttendancePolicy] = None,
                         month_name: str = "") -> AttendanceReportSummary:
    policy = policy or AttendancePolicy()
    by_employee: Dict[int, AttendanceReportRecord] = {}

    for row in rows:
        record = by_employee.get(row.employee_id)
        if record is None:
            record = by_employee[row.employee_id] = _new_record(row)
        fold_row(record, row, policy)

    records: List[AttendanceReportRecord] = sorted(
        by_employee.values(),
        key=lambda r: (-r.late_arrivals, -r.total_overtime_hours),
    )

    total_late_arrivals = sum(r.late_arrivals for r in records)
    total_late_minutes = sum(r.total_late_minutes for r in records)
    total_overtime = sum((r.total_overtime_hours for r in records), ZERO)

    if total_late_arrivals:
        avg_late = int((Decimal(total_late_minutes) / Decimal(total_late_arrivals))
                       .quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    else:
        avg_late = 0

    return AttendanceReportSummary(
        month_name=month_name,
        records=records,
        total_employees=len(records),
        total_late_arrivals=total_late_arrivals,
        total_overtime_hours=total_overtime.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
        avg_late_minutes=avg_late,
    )
