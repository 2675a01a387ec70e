# app/schemas/notification_schema.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Dict, Optional

from app.models.notification import NotificationTypeEnum


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: str
    user_id: str
    type: NotificationTypeEnum
    title: str
    message: Optional[str] = None
    link_url: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: Optional[datetime] = None
