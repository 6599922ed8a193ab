from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from hrms.models.shared.enums import AttendanceStatus, WorkMode


class LocationData(BaseModel):
    latitude: Decimal
    longitude: Decimal
    location_name: Optional[str] = None


class ClockInRequest(BaseModel):
    employee_id: int
    work_mode: Optional[WorkMode] = None
    location: Optional[LocationData] = None
    notes: Optional[str] = None


class ClockOutRequest(BaseModel):
    location: Optional[LocationData] = None
    clock_out: Optional[datetime] = None  # manual correction of a forgotten clock-out


class BreakRequest(BaseModel):
    location: Optional[LocationData] = None


class AttendanceBreakResponse(BaseModel):
    id: int
    attendance_record_id: int
    pause_time: datetime
    resume_time: Optional[datetime] = None
    pause_location_name: Optional[str] = None
    resume_location_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EmployeeInfo(BaseModel):
    id: int
    employee_code: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class AttendanceResponse(BaseModel):
    id: int
    employee_id: int
    date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    status: AttendanceStatus
    work_mode: Optional[WorkMode] = None
    notes: Optional[str] = None
    clock_in_location_name: Optional[str] = None
    clock_out_location_name: Optional[str] = None
    employee: Optional[EmployeeInfo] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AttendanceWithBreaksResponse(AttendanceResponse):
    breaks: List[AttendanceBreakResponse] = []
