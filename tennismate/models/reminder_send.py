"""ReminderSend ORM model — dedupe log for scheduled event reminders."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from tennismate.database import Base


class ReminderSend(Base):
    __tablename__ = "reminder_sends"

    send_id = Column(String(50), primary_key=True)  # "{event_id}_{kind}"
    event_id = Column(String(36), nullable=False)
    kind = Column(String(10), nullable=False)  # "24h" or "1h"
    sent_at = Column(DateTime(timezone=True), server_default=func.now())
