from tennismate.models.user import User
from tennismate.models.event import Event, EventParticipant, EventStatus, EventType
from tennismate.models.join_request import JoinRequest, JoinRequestStatus
from tennismate.models.calendar_entry import CalendarEntry
from tennismate.models.notification import Notification, NotificationType
from tennismate.models.conversation import Conversation
from tennismate.models.event_mutation import EventMutation, ActionType
from tennismate.models.reminder_send import ReminderSend

__all__ = [
    "User",
    "Event",
    "EventParticipant",
    "EventStatus",
    "EventType",
    "JoinRequest",
    "JoinRequestStatus",
    "CalendarEntry",
    "Notification",
    "NotificationType",
    "Conversation",
    "EventMutation",
    "ActionType",
    "ReminderSend",
]
