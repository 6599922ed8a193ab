from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey, Enum as SQLEnum
from hrms.db.base import BaseModel
from hrms.models.shared.enums import NotificationType

class Notification(BaseModel):
    __tablename__ = 'notifications'

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(SQLEnum(NotificationType), nullable=False, default=NotificationType.INFO)
    link = Column(String(255))
    is_read = Column(Boolean, default=False)
