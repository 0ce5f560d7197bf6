"""Post-commit fan-out: calendar mirrors, event conversation and notifications.

Every write here runs after the primary lifecycle change has committed and is
best-effort: each one is committed on its own, and a failure is logged and
rolled back without touching the others. Nothing is retried.
"""
import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tennismate.models.calendar_entry import CalendarEntry, calendar_entry_id
from tennismate.models.conversation import Conversation, event_conversation_id
from tennismate.models.event import Event
from tennismate.models.notification import Notification, NotificationType

logger = logging.getLogger(__name__)


def _best_effort(db: Session, label: str, write: Callable[[], None]) -> bool:
    """Run one side-effect write in its own transaction; swallow and log database errors."""
    try:
        write()
        db.commit()
        return True
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Best-effort %s failed: %s", label, exc)
        return False


def queue_notification(
    db: Session,
    recipient_id: str,
    type_: NotificationType,
    event_id: Optional[str],
    from_user_id: Optional[str],
    message: str,
) -> Optional[Notification]:
    """Add a notification request to the session without committing.

    Self-targeted notifications are dropped.
    """
    if not recipient_id or recipient_id == from_user_id:
        return None
    notification = Notification(
        recipient_id=recipient_id,
        type=type_,
        event_id=event_id,
        from_user_id=from_user_id,
        message=message,
        read=False,
    )
    db.add(notification)
    return notification


def notify(
    db: Session,
    recipient_id: str,
    type_: NotificationType,
    event_id: Optional[str],
    from_user_id: Optional[str],
    message: str,
) -> bool:
    return _best_effort(
        db,
        f"{type_.value} notification to {recipient_id}",
        lambda: queue_notification(db, recipient_id, type_, event_id, from_user_id, message),
    )


def calendar_member_ids(event: Event) -> list[str]:
    """Host first, then participants, de-duplicated."""
    ids: list[str] = []
    for uid in [event.host_id] + event.participant_ids:
        if uid and uid not in ids:
            ids.append(uid)
    return ids


def _upsert_entry(db: Session, event: Event, owner_id: str, all_ids: list[str]) -> None:
    entry_id = calendar_entry_id(event.event_id, owner_id)
    entry = db.get(CalendarEntry, entry_id)
    if entry is None:
        entry = CalendarEntry(entry_id=entry_id, event_id=event.event_id, owner_id=owner_id)
        db.add(entry)
    entry.title = event.title or "Tennis Event"
    entry.start_time_utc = event.start_time_utc
    entry.end_time_utc = event.end_time_utc
    entry.participants = list(all_ids)
    entry.status = "accepted"
    entry.visibility = "private"
    entry.court_name = event.location


def upsert_calendar_entries(db: Session, event: Event) -> int:
    """Mirror the event into the calendar of the host and every participant.

    Returns the number of mirrors written.
    """
    all_ids = calendar_member_ids(event)
    written = 0
    for uid in all_ids:
        if _best_effort(db, f"calendar upsert {event.event_id}/{uid}",
                        lambda uid=uid: _upsert_entry(db, event, uid, all_ids)):
            written += 1
    logger.info("Calendar synced for event %s: %d/%d entries", event.event_id, written, len(all_ids))
    return written


def delete_calendar_entry(db: Session, event_id: str, user_id: str) -> bool:
    def _delete() -> None:
        entry = db.get(CalendarEntry, calendar_entry_id(event_id, user_id))
        if entry is not None:
            db.delete(entry)

    return _best_effort(db, f"calendar delete {event_id}/{user_id}", _delete)


def ensure_event_conversation(db: Session, event: Event) -> Optional[str]:
    """Create the event's group chat or merge new members into it. Cancelled events are skipped."""
    if event.is_closed:
        return None
    conversation_id = event_conversation_id(event.event_id)
    members = calendar_member_ids(event)

    def _ensure() -> None:
        conversation = db.get(Conversation, conversation_id)
        if conversation is None:
            db.add(Conversation(
                conversation_id=conversation_id,
                event_id=event.event_id,
                title=event.title or "Event Chat",
                participants=members,
            ))
            return
        merged = list(conversation.participants or [])
        merged.extend(uid for uid in members if uid not in merged)
        conversation.participants = merged
        conversation.title = event.title or conversation.title

    if _best_effort(db, f"conversation ensure {conversation_id}", _ensure):
        return conversation_id
    return None


def remove_from_conversation(db: Session, event_id: str, user_id: str) -> bool:
    def _remove() -> None:
        conversation = db.get(Conversation, event_conversation_id(event_id))
        if conversation is None:
            return
        conversation.participants = [uid for uid in (conversation.participants or []) if uid != user_id]

    return _best_effort(db, f"conversation leave {event_id}/{user_id}", _remove)
