"""Pydantic schemas for JoinRequests."""
from datetime import datetime
from pydantic import BaseModel

from tennismate.models.join_request import JoinRequestStatus


class JoinRequestCreate(BaseModel):
    user_id: str


class JoinRequestAction(BaseModel):
    actor_user_id: str


class JoinRequestOut(BaseModel):
    request_id: str
    event_id: str
    user_id: str
    status: JoinRequestStatus
    host_notified: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
