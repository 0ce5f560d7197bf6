"""Tests for the 24h / 1h event reminder job."""
from datetime import datetime, timedelta, timezone

import pytest

from tennismate.models.notification import Notification, NotificationType
from tennismate.models.reminder_send import ReminderSend
from tennismate.services.reminder_service import format_local, reminder_kind, send_event_reminders
from tests.conftest import create_test_event, create_test_user, join_and_accept, next_slot

START = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)


class TestReminderKind:

    @pytest.mark.parametrize("lead, expected", [
        (timedelta(hours=24, minutes=5), "24h"),
        (timedelta(hours=25, minutes=9), "24h"),
        (timedelta(hours=25, minutes=10), None),
        (timedelta(hours=23, minutes=59), None),
        (timedelta(minutes=65), "1h"),
        (timedelta(minutes=59), None),
        (timedelta(hours=6), None),
    ])
    def test_kind_by_lead_time(self, lead, expected):
        assert reminder_kind(START, START - lead) == expected


class TestFormatLocal:

    def test_formats_in_recipient_timezone(self):
        assert format_local(START, "Australia/Sydney") == "Sat 10 Jan 2026, 20:00 AEDT"

    def test_unknown_timezone_falls_back_to_utc(self):
        assert format_local(START, "Mars/Olympus") == "Sat 10 Jan 2026, 09:00 UTC"
        assert format_local(START, None) == "Sat 10 Jan 2026, 09:00 UTC"


class TestSendEventReminders:

    def _setup_event(self, client):
        host = create_test_user(client, name="Host", tz="Australia/Sydney")
        player = create_test_user(client, name="Player")
        start = next_slot(days=2)
        event = create_test_event(client, host["user_id"], title="Morning Rally", start=start)
        join_and_accept(client, event, player)
        return host, player, event, start

    def test_day_before_reminder_to_host_and_participants(self, client, db):
        host, player, event, start = self._setup_event(client)
        stats = send_event_reminders(db, now=start - timedelta(hours=24, minutes=5))

        assert stats == {"events_scanned": 1, "reminders_sent": 1, "notifications": 2, "duplicates": 0}
        reminders = db.query(Notification).filter(Notification.type == NotificationType.event_reminder).all()
        assert sorted(n.recipient_id for n in reminders) == sorted([host["user_id"], player["user_id"]])
        assert all("Morning Rally is tomorrow" in n.message for n in reminders)
        assert all(event["event_id"] in n.message for n in reminders)
        assert db.get(ReminderSend, f"{event['event_id']}_24h") is not None

    def test_reminder_sent_once(self, client, db):
        _, _, event, start = self._setup_event(client)
        now = start - timedelta(minutes=65)
        send_event_reminders(db, now=now)
        stats = send_event_reminders(db, now=now + timedelta(minutes=2))

        assert stats["reminders_sent"] == 0
        assert stats["duplicates"] == 1
        count = db.query(Notification).filter(Notification.type == NotificationType.event_reminder).count()
        assert count == 2
        assert db.get(ReminderSend, f"{event['event_id']}_1h").kind == "1h"

    def test_outside_window_sends_nothing(self, client, db):
        _, _, _, start = self._setup_event(client)
        stats = send_event_reminders(db, now=start - timedelta(hours=6))
        assert stats["events_scanned"] == 1
        assert stats["reminders_sent"] == 0

    def test_cancelled_event_skipped(self, client, db):
        host, _, event, start = self._setup_event(client)
        client.post(f"/api/events/{event['event_id']}/cancel", json={"actor_user_id": host["user_id"]})
        stats = send_event_reminders(db, now=start - timedelta(hours=24, minutes=5))
        assert stats["events_scanned"] == 0
