from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum as SQLEnum, Date, DateTime
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import ReviewStatus

class PerformanceReview(BaseModel):
    __tablename__ = 'performance_reviews'

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey('employees.id'), index=True)
    review_period = Column(String(50), nullable=False)  # e.g. "Q1 2025"
    review_date = Column(Date, nullable=False)
    overall_rating = Column(Integer)  # 1-5
    strengths = Column(Text)
    areas_for_improvement = Column(Text)
    comments = Column(Text)
    status = Column(SQLEnum(ReviewStatus), nullable=False, default=ReviewStatus.DRAFT)
    acknowledged_at = Column(DateTime(timezone=True))
    acknowledged_by = Column(Integer)  # external auth user id

    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="performance_reviews")
    reviewer = relationship("Employee", foreign_keys=[reviewer_id])
