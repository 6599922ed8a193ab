from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from hrms.models.shared.enums import NotificationType


class NotificationResponse(BaseModel):
    id: int
    employee_id: int
    title: str
    message: str
    type: NotificationType
    link: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
