"""Pydantic schemas for calendar mirror entries."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CalendarEntryOut(BaseModel):
    entry_id: str
    event_id: str
    owner_id: str
    title: str
    start_time_utc: Optional[datetime] = None
    end_time_utc: Optional[datetime] = None
    participants: list[str] = []
    status: str
    visibility: str
    court_name: Optional[str] = None

    model_config = {"from_attributes": True}
