from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date, datetime

from hrms.models.shared.enums import ReviewStatus
from hrms.schemas.hr.attendance_schema import EmployeeInfo

EDITABLE_REVIEW_STATUSES = (ReviewStatus.DRAFT, ReviewStatus.SUBMITTED, ReviewStatus.COMPLETED)


def _check_editable_status(v):
    if v is not None and v not in EDITABLE_REVIEW_STATUSES:
        raise ValueError('Reviews are acknowledged by the employee, not set to acknowledged directly')
    return v


class ReviewCreate(BaseModel):
    employee_id: int
    reviewer_id: Optional[int] = None
    review_period: str = Field(..., min_length=1, max_length=50)
    review_date: date
    overall_rating: Optional[int] = Field(None, ge=1, le=5)
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None
    status: ReviewStatus = ReviewStatus.DRAFT

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_editable_status(v)


class ReviewUpdate(BaseModel):
    review_period: Optional[str] = Field(None, min_length=1, max_length=50)
    review_date: Optional[date] = None
    overall_rating: Optional[int] = Field(None, ge=1, le=5)
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None
    status: Optional[ReviewStatus] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_editable_status(v)


class ReviewResponse(BaseModel):
    id: int
    employee_id: int
    reviewer_id: Optional[int] = None
    review_period: str
    review_date: date
    overall_rating: Optional[int] = None
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    comments: Optional[str] = None
    status: ReviewStatus
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[int] = None
    created_at: Optional[datetime] = None
    employee: Optional[EmployeeInfo] = None
    reviewer: Optional[EmployeeInfo] = None

    model_config = ConfigDict(from_attributes=True)
