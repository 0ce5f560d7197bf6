"""Notification ORM model — a request record picked up by the push/email dispatcher."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.sql import func
from tennismate.database import Base


class NotificationType(str, enum.Enum):
    event_join_request = "event_join_request"
    event_join_accepted = "event_join_accepted"
    event_join_declined = "event_join_declined"
    event_left = "event_left"
    event_cancelled = "event_cancelled"
    event_reminder = "event_reminder"


class Notification(Base):
    __tablename__ = "notifications"

    notification_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    recipient_id = Column(String(36), nullable=False, index=True)
    type = Column(SAEnum(NotificationType), nullable=False)
    event_id = Column(String(36), nullable=True)
    from_user_id = Column(String(36), nullable=True)
    message = Column(String(500), nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
