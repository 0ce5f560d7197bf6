"""Pydantic schemas for Notifications."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from tennismate.models.notification import NotificationType


class NotificationOut(BaseModel):
    notification_id: str
    recipient_id: str
    type: NotificationType
    event_id: Optional[str] = None
    from_user_id: Optional[str] = None
    message: str
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
