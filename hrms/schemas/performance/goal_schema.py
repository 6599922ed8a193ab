from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date, datetime

from hrms.models.shared.enums import GoalPriority, GoalStatus
from hrms.schemas.hr.attendance_schema import EmployeeInfo


class GoalBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field("performance", max_length=50)
    priority: GoalPriority = GoalPriority.MEDIUM
    due_date: Optional[date] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Title cannot be empty')
        return v


class GoalCreate(GoalBase):
    employee_id: int


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)
    priority: Optional[GoalPriority] = None
    due_date: Optional[date] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    employee_rating: Optional[int] = Field(None, ge=1, le=5)
    manager_rating: Optional[int] = Field(None, ge=1, le=5)


class GoalResponse(GoalBase):
    id: int
    employee_id: int
    status: GoalStatus
    progress: int
    completed_at: Optional[datetime] = None
    employee_rating: Optional[int] = None
    manager_rating: Optional[int] = None
    last_reminder_sent: Optional[datetime] = None
    created_at: Optional[datetime] = None
    employee: Optional[EmployeeInfo] = None

    model_config = ConfigDict(from_attributes=True)
