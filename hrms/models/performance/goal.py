from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum as SQLEnum, Date, DateTime
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import GoalPriority, GoalStatus

class Goal(BaseModel):
    __tablename__ = 'goals'

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(String(50), default="performance")
    priority = Column(SQLEnum(GoalPriority), nullable=False, default=GoalPriority.MEDIUM)
    status = Column(SQLEnum(GoalStatus), nullable=False, default=GoalStatus.NOT_STARTED)
    progress = Column(Integer, nullable=False, default=0)  # percent
    due_date = Column(Date)
    completed_at = Column(DateTime(timezone=True))
    employee_rating = Column(Integer)
    manager_rating = Column(Integer)
    last_reminder_sent = Column(DateTime(timezone=True))

    employee = relationship("Employee", back_populates="goals")
