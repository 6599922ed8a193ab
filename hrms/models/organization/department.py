from sqlalchemy import Column, String, Boolean, Text
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel

class Department(BaseModel):
    __tablename__ = 'departments'

    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True)

    # Relationships
    employees = relationship("Employee", back_populates="department")
