"""Join-request workflow and participant capacity accounting.

Accept, decline and leave each re-read the event row inside one transaction
and commit through ``event_service.commit_mutation`` so the version guard
serializes them against each other. Capacity is checked against the
re-read row, never the caller's view of the event.
"""
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tennismate.models.event import Event, EventParticipant, EventStatus
from tennismate.models.event_mutation import ActionType
from tennismate.models.join_request import JoinRequest, JoinRequestStatus, STATUS_ORDER
from tennismate.models.notification import NotificationType
from tennismate.models.user import User
from tennismate.services import event_service, fanout

logger = logging.getLogger(__name__)


def _is_full(event: Event, filled: int) -> bool:
    return bool(event.spots_total) and filled >= event.spots_total


def _get_request(db: Session, request_id: str) -> JoinRequest:
    request = db.query(JoinRequest).filter(JoinRequest.request_id == request_id).first()
    if not request:
        raise HTTPException(status_code=404, detail="Join request not found")
    return request


def submit_join_request(db: Session, event_id: str, user_id: str) -> JoinRequest:
    """Ask to join an event. An existing request row for this user is reused and reset to pending."""
    event = event_service.get_event(db, event_id)

    if not db.query(User).filter(User.user_id == user_id).first():
        raise HTTPException(status_code=404, detail="User not found")
    if user_id == event.host_id:
        raise HTTPException(status_code=400, detail="Host cannot request to join their own event")
    if user_id in event.participant_ids:
        raise HTTPException(status_code=400, detail="Already a participant")
    if event.is_closed:
        raise HTTPException(status_code=400, detail=f"Event is {event.status.value}")
    if _is_full(event, event_service.current_filled(event)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event is already full")

    request = (
        db.query(JoinRequest)
        .filter(JoinRequest.event_id == event_id, JoinRequest.user_id == user_id)
        .first()
    )
    if request is not None and request.status == JoinRequestStatus.pending:
        logger.info("Join request %s already pending for user %s", request.request_id, user_id)
        return request

    if request is None:
        request = JoinRequest(event_id=event_id, user_id=user_id, status=JoinRequestStatus.pending)
        db.add(request)
    else:
        request.status = JoinRequestStatus.pending
        request.host_notified = False

    fanout.queue_notification(
        db,
        recipient_id=event.host_id,
        type_=NotificationType.event_join_request,
        event_id=event_id,
        from_user_id=user_id,
        message="A player has requested to join your event.",
    )
    request.host_notified = True

    try:
        db.commit()
    except IntegrityError:
        # a concurrent submit inserted the row first
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Join request already exists, retry")
    db.refresh(request)
    logger.info("User %s requested to join event %s (request %s)", user_id, event_id, request.request_id)
    return request


def accept_join_request(db: Session, request_id: str, actor_user_id: str) -> JoinRequest:
    """Host accepts a pending request: add the requester, recompute filled/status, fan out."""
    request = _get_request(db, request_id)
    event = event_service.get_event(db, request.event_id, for_update=True)
    event_service.check_host(event, actor_user_id, "accept join requests")
    db.refresh(request, with_for_update=True)

    if request.status != JoinRequestStatus.pending:
        raise HTTPException(status_code=400, detail=f"Join request is already {request.status.value}")
    if event.is_closed:
        raise HTTPException(status_code=400, detail=f"Event is {event.status.value}")

    filled = event_service.current_filled(event)
    if _is_full(event, filled):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Event is already full")

    before = event_service.event_snapshot(event)
    if request.user_id not in event.participant_ids:
        event.participants.append(EventParticipant(user_id=request.user_id))
    event.spots_filled = len(event.participants)
    if _is_full(event, event.spots_filled):
        event.status = EventStatus.full
    request.status = JoinRequestStatus.accepted
    event_service.commit_mutation(db, event, actor_user_id, ActionType.join_accepted, before)
    logger.info("Host %s accepted %s into event %s (%d/%s)",
                actor_user_id, request.user_id, event.event_id, event.spots_filled, event.spots_total)

    fanout.notify(
        db,
        recipient_id=request.user_id,
        type_=NotificationType.event_join_accepted,
        event_id=event.event_id,
        from_user_id=event.host_id,
        message="Your request to join an event was accepted!",
    )
    updated = db.query(Event).filter(Event.event_id == request.event_id).first()
    if updated is not None:
        fanout.upsert_calendar_entries(db, updated)
        fanout.ensure_event_conversation(db, updated)

    db.refresh(request)
    return request


def decline_join_request(db: Session, request_id: str, actor_user_id: str) -> JoinRequest:
    """Host declines a pending request. The row is kept with status ``declined``."""
    request = _get_request(db, request_id)
    event = event_service.get_event(db, request.event_id, for_update=True)
    event_service.check_host(event, actor_user_id, "decline join requests")
    db.refresh(request, with_for_update=True)

    if request.status != JoinRequestStatus.pending:
        raise HTTPException(status_code=400, detail=f"Join request is already {request.status.value}")
    if event.is_closed:
        raise HTTPException(status_code=400, detail=f"Event is {event.status.value}")

    before = event_service.event_snapshot(event)
    request.status = JoinRequestStatus.declined
    # bump the event version so an accept racing on the same request loses
    event.updated_at = datetime.now(timezone.utc)
    event_service.commit_mutation(db, event, actor_user_id, ActionType.join_declined, before)
    logger.info("Host %s declined request %s for event %s", actor_user_id, request_id, event.event_id)

    fanout.notify(
        db,
        recipient_id=request.user_id,
        type_=NotificationType.event_join_declined,
        event_id=request.event_id,
        from_user_id=actor_user_id,
        message="Your request to join an event was declined.",
    )
    db.refresh(request)
    return request


def leave_event(db: Session, event_id: str, actor_user_id: str) -> Event:
    """A participant leaves; a full event drops back to open once a spot frees up."""
    event = event_service.get_event(db, event_id, for_update=True)

    if actor_user_id == event.host_id:
        raise HTTPException(status_code=400, detail="Host cannot leave")
    membership = next((p for p in event.participants if p.user_id == actor_user_id), None)
    if membership is None:
        raise HTTPException(status_code=400, detail="Not a participant of this event")
    if event.is_closed:
        raise HTTPException(status_code=400, detail=f"Event is {event.status.value}")

    before = event_service.event_snapshot(event)
    event.participants.remove(membership)
    event.spots_filled = len(event.participants)
    if event.status == EventStatus.full and event.spots_total and event.spots_filled < event.spots_total:
        event.status = EventStatus.open

    accepted = (
        db.query(JoinRequest)
        .filter(
            JoinRequest.event_id == event_id,
            JoinRequest.user_id == actor_user_id,
            JoinRequest.status == JoinRequestStatus.accepted,
        )
        .all()
    )
    for request in accepted:
        request.status = JoinRequestStatus.left

    event_service.commit_mutation(db, event, actor_user_id, ActionType.leave, before)
    db.refresh(event)
    logger.info("User %s left event %s (%d/%s, %s)",
                actor_user_id, event_id, event.spots_filled, event.spots_total, event.status.value)

    fanout.notify(
        db,
        recipient_id=event.host_id,
        type_=NotificationType.event_left,
        event_id=event_id,
        from_user_id=actor_user_id,
        message="A participant left your event.",
    )
    fanout.delete_calendar_entry(db, event_id, actor_user_id)
    fanout.remove_from_conversation(db, event_id, actor_user_id)

    db.refresh(event)
    return event


def list_join_requests(db: Session, event_id: str, actor_user_id: str) -> list[JoinRequest]:
    """Host view of all requests for an event: pending first, declined last."""
    event = event_service.get_event(db, event_id)
    event_service.check_host(event, actor_user_id, "view join requests")
    requests = db.query(JoinRequest).filter(JoinRequest.event_id == event_id).all()
    return sorted(requests, key=lambda r: STATUS_ORDER[r.status])
