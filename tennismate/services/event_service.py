"""Core event service — creation, cancellation and the shared transaction helpers.

Responsibilities:
- Capacity policy per event type (clamp + defaults)
- Authorization hook: only the host may cancel
- Row re-read under ``FOR UPDATE`` plus the mapper version guard
- Mutation ledger (EventMutations) for every lifecycle write
- Post-commit fan-out (calendar mirror, conversation, notifications)
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytz
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tennismate.models.event import Event, EventStatus, EventType
from tennismate.models.event_mutation import EventMutation, ActionType
from tennismate.models.notification import NotificationType
from tennismate.models.user import User
from tennismate.services import fanout

logger = logging.getLogger(__name__)

# type -> (min, max, default); max None means unbounded
CAPACITY_POLICY: dict[EventType, tuple[int, Optional[int], int]] = {
    EventType.singles: (1, 1, 1),
    EventType.doubles: (2, 4, 3),
    EventType.social: (5, None, 5),
}

DESCRIPTION_LIMIT = 300
PAST_START_GRACE = timedelta(minutes=1)


def clamp_capacity(event_type: EventType, requested: Optional[int]) -> int:
    """Move a requested capacity inside the type's bounds; None picks the default."""
    low, high, default = CAPACITY_POLICY[event_type]
    if requested is None:
        return default
    spots = max(low, requested)
    if high is not None:
        spots = min(high, spots)
    return spots


def to_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def user_timezone(tz_name: Optional[str]):
    """pytz zone for an IANA name; unknown or empty names fall back to UTC."""
    try:
        return pytz.timezone(tz_name or "UTC")
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown timezone %r, using UTC", tz_name)
        return pytz.utc


def current_filled(event: Event) -> int:
    """Stored filled count, falling back to the participant rows."""
    if event.spots_filled is not None:
        return event.spots_filled
    return len(event.participants)


def event_snapshot(event: Event) -> dict[str, Any]:
    """Serialize an event to a JSON-safe dict for the mutation ledger."""
    return {
        "event_id": str(event.event_id),
        "title": event.title,
        "start_time_utc": event.start_time_utc.isoformat() if event.start_time_utc else None,
        "status": event.status.value if event.status else None,
        "spots_total": event.spots_total,
        "spots_filled": event.spots_filled,
        "participants": event.participant_ids,
        "version": event.version,
    }


def get_event(db: Session, event_id: str, for_update: bool = False) -> Event:
    """Load an event or raise 404. ``for_update`` re-reads it inside the current transaction."""
    query = db.query(Event).filter(Event.event_id == event_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    event = query.first()
    if not event:
        raise HTTPException(status_code=404, detail="Event no longer exists" if for_update else "Event not found")
    return event


def check_host(event: Event, actor_user_id: str, action: str) -> None:
    if event.host_id != actor_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the host can {action}",
        )


def commit_mutation(
    db: Session,
    event: Event,
    actor_user_id: str,
    action: ActionType,
    before: Optional[dict[str, Any]],
) -> None:
    """Flush the pending changes, append the ledger row and commit atomically.

    A concurrent writer that bumped ``version`` first makes the flush fail
    with ``StaleDataError``; that is reported as 409 and nothing is written.
    """
    try:
        db.flush()
        db.add(EventMutation(
            event_id=event.event_id,
            actor_user_id=actor_user_id,
            action_type=action,
            before_snapshot=before,
            after_snapshot=event_snapshot(event),
            idempotency_key=str(uuid.uuid4()),
        ))
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning("Concurrent modification of event %s during %s", event.event_id, action.value)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Event was modified concurrently, retry",
        )


def create_event(
    db: Session,
    host_id: str,
    title: str,
    event_type: EventType,
    location: str,
    start_utc: datetime,
    duration_mins: int = 60,
    min_skill: Optional[str] = None,
    spots_total: Optional[int] = None,
    description: Optional[str] = None,
) -> Event:
    """Create an open event hosted by ``host_id`` and mirror it into the host's calendar."""
    title = title.strip()
    location = location.strip()
    if not title or not location:
        raise HTTPException(status_code=400, detail="Title and location are required")

    host = db.query(User).filter(User.user_id == host_id).first()
    if not host:
        raise HTTPException(status_code=404, detail="Host user not found")

    start_utc = to_utc(start_utc)
    # steps are on the host's wall clock; zones like Asia/Kathmandu are offset by :45
    local_start = start_utc.astimezone(user_timezone(host.default_timezone))
    if local_start.minute not in (0, 30) or local_start.second or local_start.microsecond:
        raise HTTPException(status_code=400, detail="Start time must be on a 30-minute step")
    if start_utc < datetime.now(timezone.utc) - PAST_START_GRACE:
        raise HTTPException(status_code=400, detail="Start time is in the past")

    description = (description or "").strip() or None
    if description and len(description) > DESCRIPTION_LIMIT:
        raise HTTPException(status_code=400, detail=f"Description is limited to {DESCRIPTION_LIMIT} characters")

    event = Event(
        host_id=host_id,
        title=title,
        event_type=event_type,
        location=location,
        start_time_utc=start_utc,
        end_time_utc=start_utc + timedelta(minutes=duration_mins),
        duration_mins=duration_mins,
        min_skill=min_skill,
        spots_total=clamp_capacity(event_type, spots_total),
        spots_filled=0,
        status=EventStatus.open,
        description=description,
    )
    db.add(event)
    commit_mutation(db, event, host_id, ActionType.create, before=None)
    db.refresh(event)
    logger.info("Created %s event '%s' (%s) by host %s", event_type.value, title, event.event_id, host_id)

    fanout.upsert_calendar_entries(db, event)
    fanout.ensure_event_conversation(db, event)
    db.refresh(event)
    return event


def cancel_event(
    db: Session,
    event_id: str,
    actor_user_id: str,
    version: Optional[int] = None,
) -> Event:
    """Cancel an event (host only), then notify participants and drop every calendar mirror."""
    event = get_event(db, event_id, for_update=True)
    check_host(event, actor_user_id, "cancel")

    if event.is_closed:
        raise HTTPException(status_code=400, detail=f"Event is already {event.status.value}")

    if version is not None and event.version != version:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Version mismatch: expected {event.version}, got {version}. Re-fetch and retry.",
        )

    before = event_snapshot(event)
    event.status = EventStatus.cancelled
    event.cancelled_at = datetime.now(timezone.utc)
    commit_mutation(db, event, actor_user_id, ActionType.cancel, before)
    db.refresh(event)
    logger.info("Cancelled event %s by host %s", event_id, actor_user_id)

    participant_ids = [uid for uid in event.participant_ids if uid != event.host_id]
    for pid in participant_ids:
        fanout.notify(
            db,
            recipient_id=pid,
            type_=NotificationType.event_cancelled,
            event_id=event.event_id,
            from_user_id=event.host_id,
            message="The host cancelled the event.",
        )
    for uid in [event.host_id] + participant_ids:
        fanout.delete_calendar_entry(db, event.event_id, uid)

    db.refresh(event)
    return event


def list_events(
    db: Session,
    event_status: Optional[EventStatus] = None,
    event_type: Optional[EventType] = None,
    host_id: Optional[str] = None,
    include_cancelled: bool = False,
) -> list[Event]:
    query = db.query(Event)
    if event_status:
        query = query.filter(Event.status == event_status)
    elif not include_cancelled:
        query = query.filter(Event.status != EventStatus.cancelled)
    if event_type:
        query = query.filter(Event.event_type == event_type)
    if host_id:
        query = query.filter(Event.host_id == host_id)
    return query.order_by(Event.start_time_utc).all()
