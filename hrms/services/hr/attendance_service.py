import logging
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import extract, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.core.config import settings
from hrms.core.exceptions import BadRequestError, NotFoundError, ValidationError
from hrms.models.hr.attendance import AttendanceBreak, AttendanceRecord
from hrms.models.hr.employee import DEFAULT_WORKING_DAYS, Employee
from hrms.models.shared.enums import AttendanceStatus, EmployeeStatus
from hrms.schemas.hr.attendance_schema import BreakRequest, ClockInRequest, ClockOutRequest
from hrms.services.reports.attendance_aggregator import AttendancePolicy, calculate_late_minutes
from hrms.utils.date_time import hours_between, minutes_of_day, now_local, parse_time, to_local

logger = logging.getLogger(__name__)

CLOCK_IN_REMINDER = "clock_in"
CLOCK_OUT_REMINDER = "clock_out"

MINUTES_PER_DAY = 24 * 60


def calculate_total_break_hours(breaks: Iterable[AttendanceBreak]) -> Decimal:
    """Sum of finished breaks in hours; a break still open counts as nothing."""
    total = Decimal("0")
    for brk in breaks:
        if brk.pause_time is None or brk.resume_time is None:
            continue
        total += hours_between(to_local(brk.pause_time), to_local(brk.resume_time))
    return total


def calculate_worked_hours(clock_in: datetime, clock_out: datetime, break_hours: Decimal) -> Decimal:
    gross = hours_between(to_local(clock_in), to_local(clock_out))
    worked = max(Decimal("0"), gross - break_hours)
    return worked.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _minutes_apart(a: int, b: int) -> int:
    diff = abs(a - b) % MINUTES_PER_DAY
    return min(diff, MINUTES_PER_DAY - diff)


def due_reminder(employee: Employee, record: Optional[AttendanceRecord], now: datetime) -> Optional[str]:
    """Which reminder, if any, ``employee`` should get at ``now``."""
    working_days = employee.working_days or DEFAULT_WORKING_DAYS
    if now.isoweekday() not in working_days:
        return None

    start = employee.working_hours_start or parse_time(settings.DEFAULT_WORKING_HOURS_START)
    end = employee.working_hours_end or parse_time(settings.DEFAULT_WORKING_HOURS_END)
    now_minutes = minutes_of_day(now)
    window = settings.REMINDER_WINDOW_MINUTES

    clock_in_target = minutes_of_day(start) - settings.CLOCK_IN_REMINDER_LEAD_MINUTES
    if _minutes_apart(now_minutes, clock_in_target) <= window:
        if record is None or record.clock_in is None:
            return CLOCK_IN_REMINDER

    if _minutes_apart(now_minutes, minutes_of_day(end)) <= window:
        if record is not None and record.clock_in is not None and record.clock_out is None:
            return CLOCK_OUT_REMINDER

    return None


class AttendanceService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # region Helpers
    async def _get_active_employee(self, employee_id: int) -> Employee:
        result = await self.session.execute(
            select(Employee).where(
                Employee.id == employee_id,
                Employee.is_deleted == False
            )
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError(f"Employee with ID {employee_id} not found")
        if employee.status == EmployeeStatus.OFFBOARDED:
            raise BadRequestError("Offboarded employees cannot record attendance")
        return employee

    async def _get_record_for_day(self, employee_id: int, day: date) -> Optional[AttendanceRecord]:
        result = await self.session.execute(
            select(AttendanceRecord)
            .options(selectinload(AttendanceRecord.breaks), selectinload(AttendanceRecord.employee))
            .where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.date == day,
                AttendanceRecord.is_deleted == False
            )
        )
        return result.scalar_one_or_none()

    async def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        result = await self.session.execute(
            select(AttendanceRecord)
            .options(selectinload(AttendanceRecord.breaks), selectinload(AttendanceRecord.employee))
            .where(
                AttendanceRecord.id == record_id,
                AttendanceRecord.is_deleted == False
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_open_record(self, record_id: int) -> AttendanceRecord:
        record = await self.get_record(record_id)
        if record is None:
            raise NotFoundError("Attendance record not found")
        if record.clock_out is not None:
            raise BadRequestError("Already clocked out")
        return record
    # endregion

    # region Punches
    async def clock_in(self, data: ClockInRequest, now: Optional[datetime] = None) -> AttendanceRecord:
        try:
            employee = await self._get_active_employee(data.employee_id)
            now = to_local(now) if now else now_local()

            existing = await self._get_record_for_day(employee.id, now.date())
            if existing is not None and existing.clock_in is not None:
                raise BadRequestError("Already clocked in today")

            work_start = employee.working_hours_start or parse_time(settings.DEFAULT_WORKING_HOURS_START)
            late_minutes = calculate_late_minutes(now, work_start, AttendancePolicy.from_settings())
            attendance_status = AttendanceStatus.LATE if late_minutes > 0 else AttendanceStatus.PRESENT

            record = existing or AttendanceRecord(employee_id=employee.id, date=now.date())
            record.clock_in = now
            record.status = attendance_status
            record.work_mode = data.work_mode
            record.notes = data.notes
            if data.location:
                record.clock_in_latitude = data.location.latitude
                record.clock_in_longitude = data.location.longitude
                record.clock_in_location_name = data.location.location_name

            if existing is None:
                self.session.add(record)
            await self.session.commit()

            logger.info(
                f"Employee {employee.employee_code} clocked in at {now.isoformat()} "
                f"({attendance_status.value}, {late_minutes} min late)"
            )
            return await self.get_record(record.id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error clocking in employee {data.employee_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error recording clock-in")

    async def clock_out(self, record_id: int, data: ClockOutRequest, now: Optional[datetime] = None) -> AttendanceRecord:
        try:
            record = await self._get_open_record(record_id)
            if record.clock_in is None:
                raise BadRequestError("Cannot clock out without a clock-in")

            clock_out_time = to_local(data.clock_out) if data.clock_out else (to_local(now) if now else now_local())
            clock_in_time = to_local(record.clock_in)
            if clock_out_time < clock_in_time:
                raise ValidationError("Clock-out time cannot be before clock-in time")

            for brk in record.breaks:
                if brk.resume_time is None:
                    brk.resume_time = clock_out_time
                    if data.location:
                        brk.resume_latitude = data.location.latitude
                        brk.resume_longitude = data.location.longitude
                        brk.resume_location_name = data.location.location_name

            break_hours = calculate_total_break_hours(record.breaks)
            record.clock_out = clock_out_time
            record.total_hours = calculate_worked_hours(clock_in_time, clock_out_time, break_hours)
            if data.location:
                record.clock_out_latitude = data.location.latitude
                record.clock_out_longitude = data.location.longitude
                record.clock_out_location_name = data.location.location_name

            await self.session.commit()
            logger.info(
                f"Attendance {record_id} clocked out at {clock_out_time.isoformat()}, "
                f"{record.total_hours}h worked after {break_hours:.2f}h of breaks"
            )
            return await self.get_record(record_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error clocking out attendance {record_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error recording clock-out")
    # endregion

    # region Breaks
    async def pause(self, record_id: int, data: BreakRequest, now: Optional[datetime] = None) -> AttendanceRecord:
        try:
            record = await self._get_open_record(record_id)
            if any(brk.resume_time is None for brk in record.breaks):
                raise BadRequestError("A break is already in progress")

            brk = AttendanceBreak(
                attendance_record_id=record.id,
                pause_time=to_local(now) if now else now_local(),
            )
            if data.location:
                brk.pause_latitude = data.location.latitude
                brk.pause_longitude = data.location.longitude
                brk.pause_location_name = data.location.location_name
            self.session.add(brk)
            await self.session.commit()

            logger.info(f"Break started on attendance {record_id}")
            return await self.get_record(record_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error starting break on attendance {record_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error starting break")

    async def resume(self, record_id: int, data: BreakRequest, now: Optional[datetime] = None) -> AttendanceRecord:
        try:
            record = await self._get_open_record(record_id)
            open_break = next((brk for brk in record.breaks if brk.resume_time is None), None)
            if open_break is None:
                raise BadRequestError("No break in progress to resume")

            resume_time = to_local(now) if now else now_local()
            if resume_time < to_local(open_break.pause_time):
                raise ValidationError("Resume time cannot be before the break started")

            open_break.resume_time = resume_time
            if data.location:
                open_break.resume_latitude = data.location.latitude
                open_break.resume_longitude = data.location.longitude
                open_break.resume_location_name = data.location.location_name
            await self.session.commit()

            logger.info(f"Break resumed on attendance {record_id}")
            return await self.get_record(record_id)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error resuming break on attendance {record_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error resuming break")
    # endregion

    # region Queries
    async def get_today_attendance(self, employee_id: int, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        """Today's record, or yesterday's if that shift is still open past midnight."""
        now = to_local(now) if now else now_local()
        record = await self._get_record_for_day(employee_id, now.date())
        if record is not None:
            return record

        yesterday = await self._get_record_for_day(employee_id, now.date() - timedelta(days=1))
        if yesterday is not None and yesterday.clock_in is not None and yesterday.clock_out is None:
            return yesterday
        return None

    async def list_attendance(self, month: int, year: int, employee_id: Optional[int] = None) -> List[AttendanceRecord]:
        query = (
            select(AttendanceRecord)
            .options(selectinload(AttendanceRecord.breaks), selectinload(AttendanceRecord.employee))
            .where(
                extract("month", AttendanceRecord.date) == month,
                extract("year", AttendanceRecord.date) == year,
                AttendanceRecord.is_deleted == False
            )
        )
        if employee_id:
            query = query.where(AttendanceRecord.employee_id == employee_id)

        result = await self.session.execute(query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.id))
        return list(result.scalars().all())

    async def get_due_reminders(self, now: Optional[datetime] = None) -> List[Tuple[Employee, str]]:
        now = to_local(now) if now else now_local()
        employees = (await self.session.execute(
            select(Employee).where(
                Employee.status == EmployeeStatus.ACTIVE,
                Employee.is_deleted == False
            ).order_by(Employee.id)
        )).scalars().all()
        if not employees:
            return []

        records = (await self.session.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.date == now.date(),
                AttendanceRecord.employee_id.in_([e.id for e in employees])
            )
        )).scalars().all()
        by_employee = {r.employee_id: r for r in records}

        due = []
        for employee in employees:
            kind = due_reminder(employee, by_employee.get(employee.id), now)
            if kind:
                due.append((employee, kind))
        return due
    # endregion
