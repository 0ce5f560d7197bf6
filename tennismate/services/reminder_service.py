"""Event reminders — 24h and 1h before start, sent once per event and kind.

The job scans events starting within the next day plus the scan window. An
event falls into a reminder kind when its start is between ``lead`` and
``lead + REMINDER_WINDOW`` away. The window is wider than the job interval so
a late run still catches every event; ``ReminderSend`` rows keep it from
sending twice.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from tennismate.config import settings
from tennismate.models.event import Event, EventStatus
from tennismate.models.notification import NotificationType
from tennismate.models.reminder_send import ReminderSend
from tennismate.models.user import User
from tennismate.services.event_service import to_utc, user_timezone
from tennismate.services.fanout import calendar_member_ids, queue_notification

logger = logging.getLogger(__name__)

REMINDER_WINDOW = timedelta(minutes=70)
REMINDER_LEADS = (("24h", timedelta(hours=24)), ("1h", timedelta(hours=1)))


def reminder_kind(start_utc: datetime, now: datetime) -> Optional[str]:
    """Return "24h", "1h" or None for an event start relative to ``now``."""
    delta = start_utc - now
    for kind, lead in REMINDER_LEADS:
        if lead <= delta < lead + REMINDER_WINDOW:
            return kind
    return None


def format_local(start_utc: datetime, tz_name: Optional[str]) -> str:
    """Render a start time in the recipient's timezone, falling back to UTC."""
    return start_utc.astimezone(user_timezone(tz_name)).strftime("%a %d %b %Y, %H:%M %Z")


def _reminder_message(event: Event, kind: str, when: str) -> str:
    headline = (
        f"Reminder: {event.title} is tomorrow"
        if kind == "24h"
        else f"Reminder: {event.title} starts in about an hour"
    )
    link = f"{settings.APP_BASE_URL}/events/{event.event_id}"
    return f"{headline} ({when}, {event.location}). {link}"


def send_event_reminders(db: Session, now: Optional[datetime] = None) -> dict[str, int]:
    """Queue reminder notifications for upcoming events. Returns run statistics."""
    now = to_utc(now or datetime.now(timezone.utc))
    upper = now + REMINDER_LEADS[0][1] + REMINDER_WINDOW
    stats = {"events_scanned": 0, "reminders_sent": 0, "notifications": 0, "duplicates": 0}

    events = (
        db.query(Event)
        .filter(
            Event.status.in_([EventStatus.open, EventStatus.full]),
            Event.start_time_utc >= now,
            Event.start_time_utc < upper,
        )
        .order_by(Event.start_time_utc)
        .all()
    )

    for event in events:
        stats["events_scanned"] += 1
        start_utc = to_utc(event.start_time_utc)
        kind = reminder_kind(start_utc, now)
        if kind is None:
            continue

        send_id = f"{event.event_id}_{kind}"
        if db.get(ReminderSend, send_id) is not None:
            logger.debug("Skip duplicate %s reminder for event %s", kind, event.event_id)
            stats["duplicates"] += 1
            continue

        for uid in calendar_member_ids(event):
            user = db.query(User).filter(User.user_id == uid).first()
            when = format_local(start_utc, user.default_timezone if user else None)
            if queue_notification(
                db,
                recipient_id=uid,
                type_=NotificationType.event_reminder,
                event_id=event.event_id,
                from_user_id=None,
                message=_reminder_message(event, kind, when),
            ):
                stats["notifications"] += 1

        db.add(ReminderSend(send_id=send_id, event_id=event.event_id, kind=kind))
        db.commit()
        stats["reminders_sent"] += 1
        logger.info("Queued %s reminder for event %s", kind, event.event_id)

    return stats
