from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from hrms.models.shared.enums import AttendanceStatus


class DepartmentRef(BaseModel):
    name: str

    model_config = ConfigDict(from_attributes=True)


class EmployeeScheduleRow(BaseModel):
    """Employee columns joined onto an attendance row."""
    first_name: str
    last_name: str
    employee_code: str
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None
    department: Optional[DepartmentRef] = None

    model_config = ConfigDict(from_attributes=True)


class AttendanceRow(BaseModel):
    """Typed boundary between the attendance table and the report fold."""
    employee_id: int
    date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    employee: EmployeeScheduleRow

    model_config = ConfigDict(from_attributes=True)


class AttendanceReportRecord(BaseModel):
    employee_id: int
    employee_name: str
    employee_code: str
    department: str
    total_days: int = 0
    total_hours: Decimal = Decimal("0")
    late_arrivals: int = 0
    total_late_minutes: int = 0
    total_overtime_hours: Decimal = Decimal("0")
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None


class AttendanceReportSummary(BaseModel):
    month_name: str
    records: List[AttendanceReportRecord]
    total_employees: int
    total_late_arrivals: int
    total_overtime_hours: Decimal
    avg_late_minutes: int
