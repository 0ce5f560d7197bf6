"""CalendarEntry ORM model — per-user mirror of an event for "my calendar" queries."""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from tennismate.database import Base


def calendar_entry_id(event_id: str, user_id: str) -> str:
    return f"{event_id}_{user_id}"


class CalendarEntry(Base):
    __tablename__ = "calendar_entries"

    entry_id = Column(String(80), primary_key=True)
    # No FK to events: mirrors are owned by the (event, user) pair and may outlive a failed cleanup.
    event_id = Column(String(36), nullable=False, index=True)
    owner_id = Column(String(36), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    start_time_utc = Column(DateTime(timezone=True), nullable=True)
    end_time_utc = Column(DateTime(timezone=True), nullable=True)
    participants = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="accepted")
    visibility = Column(String(20), nullable=False, default="private")
    court_name = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
