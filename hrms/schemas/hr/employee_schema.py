from pydantic import BaseModel, ConfigDict, field_validator, model_validator, EmailStr
from typing import Dict, List, Optional
from datetime import date, datetime, time

from hrms.models.shared.enums import EmployeeStatus
from hrms.schemas.organization.department_schema import DepartmentResponse


def _check_working_days(v):
    if v is None:
        return v
    if any(day < 1 or day > 7 for day in v):
        raise ValueError('Working days must be ISO weekdays (1=Monday .. 7=Sunday)')
    return sorted(set(v))


class EmployeeBase(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    user_id: Optional[int] = None
    phone: Optional[str] = None
    designation: Optional[str] = None
    hire_date: date
    department_id: Optional[int] = None
    manager_id: Optional[int] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None
    working_days: Optional[List[int]] = None
    address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EmployeeCreate(EmployeeBase):
    employee_code: Optional[str] = None  # allocated from the code pattern when omitted

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_names(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError('Name must be at least 2 characters')
        return v.strip().title()

    @field_validator('hire_date')
    @classmethod
    def validate_hire_date(cls, v):
        if v > date.today():
            raise ValueError('Hire date cannot be in the future')
        return v

    @field_validator('working_days')
    @classmethod
    def validate_working_days(cls, v):
        return _check_working_days(v)

    @model_validator(mode='after')
    def validate_working_hours(self):
        if (self.working_hours_start is None) != (self.working_hours_end is None):
            raise ValueError('Working hours need both a start and an end')
        return self


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    user_id: Optional[int] = None
    phone: Optional[str] = None
    designation: Optional[str] = None
    department_id: Optional[int] = None
    manager_id: Optional[int] = None
    status: Optional[EmployeeStatus] = None
    working_hours_start: Optional[time] = None
    working_hours_end: Optional[time] = None
    working_days: Optional[List[int]] = None
    address: Optional[str] = None

    @field_validator('working_days')
    @classmethod
    def validate_working_days(cls, v):
        return _check_working_days(v)


class EmployeeResponse(EmployeeBase):
    id: int
    employee_code: str
    department: Optional[DepartmentResponse] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EmployeeStats(BaseModel):
    total: int
    by_status: Dict[str, int]
