from sqlalchemy import Column, String, Text, JSON
from hrms.db.base import BaseModel

class SystemSetting(BaseModel):
    __tablename__ = 'system_settings'

    setting_key = Column(String(100), nullable=False, unique=True)
    setting_value = Column(JSON)
    description = Column(Text)
