"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from tennismate.models.event import EventStatus, EventType


class EventCreate(BaseModel):
    host_id: str
    title: str
    event_type: EventType = EventType.singles
    location: str
    start_time_utc: datetime
    duration_mins: int = Field(60, gt=0, le=24 * 60)
    min_skill: Optional[Literal["Beginner", "Intermediate", "Advanced"]] = None
    spots_total: Optional[int] = None  # clamped to the type's capacity bounds
    description: Optional[str] = None


class EventOut(BaseModel):
    event_id: str
    host_id: str
    title: str
    event_type: EventType
    location: str
    start_time_utc: datetime
    end_time_utc: datetime
    duration_mins: int
    min_skill: Optional[str] = None
    spots_total: Optional[int] = None
    spots_filled: int
    status: EventStatus
    description: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    participant_ids: list[str] = []
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventCancelRequest(BaseModel):
    actor_user_id: str
    version: Optional[int] = None  # optional optimistic lock


class EventLeaveRequest(BaseModel):
    actor_user_id: str
