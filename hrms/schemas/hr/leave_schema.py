from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime

from hrms.models.shared.enums import LeaveStatus
from hrms.schemas.hr.attendance_schema import EmployeeInfo


class LeaveTypeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    days_per_year: int = Field(0, ge=0)
    is_paid: bool = True


class LeaveTypeResponse(LeaveTypeCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class LeaveRequestCreate(BaseModel):
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    reason: Optional[str] = None

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError('End date cannot be before start date')
        if self.reason is not None:
            self.reason = self.reason.strip() or None
        return self


class LeaveReview(BaseModel):
    status: LeaveStatus
    reviewer_name: str
    review_notes: Optional[str] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
            raise ValueError('A review must approve or reject the request')
        return v


class LeaveRequestResponse(BaseModel):
    id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    days_count: int
    reason: Optional[str] = None
    status: LeaveStatus
    reviewer_name: Optional[str] = None
    review_notes: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    leave_type: Optional[LeaveTypeResponse] = None
    employee: Optional[EmployeeInfo] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveBalance(BaseModel):
    leave_type_id: int
    leave_type: str
    is_paid: bool
    total_days: int
    used_days: int
    remaining_days: int
    year: int
