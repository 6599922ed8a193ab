from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, Enum as SQLEnum, Date
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import LeaveStatus

class LeaveType(BaseModel):
    __tablename__ = 'leave_types'

    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text)
    days_per_year = Column(Integer, nullable=False, default=0)
    is_paid = Column(Boolean, default=True)

    requests = relationship("LeaveRequest", back_populates="leave_type")


class LeaveRequest(BaseModel):
    __tablename__ = 'leave_requests'

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    leave_type_id = Column(Integer, ForeignKey('leave_types.id'), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    days_count = Column(Integer, nullable=False)
    reason = Column(Text)
    status = Column(SQLEnum(LeaveStatus), nullable=False, default=LeaveStatus.PENDING)
    reviewer_name = Column(String(100))
    review_notes = Column(Text)
    reviewed_at = Column(DateTime(timezone=True))

    employee = relationship("Employee", back_populates="leave_requests")
    leave_type = relationship("LeaveType", back_populates="requests")
