"""Event API routes — delegates to the services for invariant enforcement."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tennismate.database import get_db
from tennismate.models.event import EventStatus, EventType
from tennismate.schemas.event import EventCreate, EventOut, EventCancelRequest, EventLeaveRequest
from tennismate.schemas.join_request import JoinRequestCreate, JoinRequestOut
from tennismate.services import event_service, participation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create a new open event; the caller becomes the host."""
    return event_service.create_event(
        db=db,
        host_id=payload.host_id,
        title=payload.title,
        event_type=payload.event_type,
        location=payload.location,
        start_utc=payload.start_time_utc,
        duration_mins=payload.duration_mins,
        min_skill=payload.min_skill,
        spots_total=payload.spots_total,
        description=payload.description,
    )


@router.get("/", response_model=list[EventOut])
def list_events(
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    event_type: Optional[EventType] = Query(None),
    host_id: Optional[str] = Query(None),
    include_cancelled: bool = Query(False),
    db: Session = Depends(get_db),
):
    """List events with optional filters, soonest first."""
    return event_service.list_events(
        db,
        event_status=status_filter,
        event_type=event_type,
        host_id=host_id,
        include_cancelled=include_cancelled,
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single event with its participants."""
    return event_service.get_event(db, event_id)


@router.post("/{event_id}/cancel", response_model=EventOut)
def cancel_event(event_id: str, payload: EventCancelRequest, db: Session = Depends(get_db)):
    """Cancel an event (host only)."""
    return event_service.cancel_event(
        db=db,
        event_id=event_id,
        actor_user_id=payload.actor_user_id,
        version=payload.version,
    )


@router.post("/{event_id}/leave", response_model=EventOut)
def leave_event(event_id: str, payload: EventLeaveRequest, db: Session = Depends(get_db)):
    """Leave an event the caller was accepted into (host excluded)."""
    return participation_service.leave_event(db, event_id, payload.actor_user_id)


@router.post("/{event_id}/join-requests", response_model=JoinRequestOut, status_code=status.HTTP_201_CREATED)
def submit_join_request(event_id: str, payload: JoinRequestCreate, db: Session = Depends(get_db)):
    """Request to join an event. Re-requesting reuses the caller's existing request."""
    return participation_service.submit_join_request(db, event_id, payload.user_id)


@router.get("/{event_id}/join-requests", response_model=list[JoinRequestOut])
def list_join_requests(
    event_id: str,
    actor_user_id: str = Query(..., description="ID of the host viewing the requests"),
    db: Session = Depends(get_db),
):
    """List join requests for an event (host only)."""
    return participation_service.list_join_requests(db, event_id, actor_user_id)
