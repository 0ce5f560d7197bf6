"""Tests for the version guard that serializes lifecycle writes on one event."""
import pytest
from fastapi import HTTPException

from tennismate.models.event import Event, EventStatus
from tennismate.models.event_mutation import ActionType, EventMutation
from tennismate.services import event_service, participation_service
from tests.conftest import accept, create_test_event, create_test_user, request_to_join


class TestVersionGuard:

    def test_stale_write_rejected(self, client, session_factory):
        """A session holding an old copy of the event loses to a committed accept."""
        host = create_test_user(client, name="Host")
        player = create_test_user(client, name="Player")
        event = create_test_event(client, host["user_id"], event_type="singles")
        req = request_to_join(client, event["event_id"], player["user_id"])

        stale = session_factory()
        try:
            loaded = stale.get(Event, event["event_id"])
            before = event_service.event_snapshot(loaded)
            assert loaded.version == 1

            assert accept(client, req["request_id"], host["user_id"]).status_code == 200

            loaded.status = EventStatus.cancelled
            with pytest.raises(HTTPException) as exc_info:
                event_service.commit_mutation(stale, loaded, host["user_id"], ActionType.cancel, before)
            assert exc_info.value.status_code == 409
        finally:
            stale.close()

        data = client.get(f"/api/events/{event['event_id']}").json()
        assert data["status"] == "full"
        assert data["version"] == 2

    def test_version_bumps_once_per_change(self, client, db):
        host = create_test_user(client, name="Host")
        player = create_test_user(client, name="Player")
        event = create_test_event(client, host["user_id"], event_type="doubles")
        req = request_to_join(client, event["event_id"], player["user_id"])
        accept(client, req["request_id"], host["user_id"])
        client.post(f"/api/events/{event['event_id']}/leave", json={"actor_user_id": player["user_id"]})

        assert client.get(f"/api/events/{event['event_id']}").json()["version"] == 3
        actions = [
            m.action_type
            for m in db.query(EventMutation)
            .filter(EventMutation.event_id == event["event_id"])
            .order_by(EventMutation.created_at)
            .all()
        ]
        assert sorted(a.value for a in actions) == ["create", "join_accepted", "leave"]


def _race_after_checks(monkeypatch, competing):
    """Run ``competing`` once, right after the first writer has passed its checks."""
    real_snapshot = event_service.event_snapshot
    state = {"fired": False}

    def snapshot_then_race(event):
        if not state["fired"]:
            state["fired"] = True
            competing()
        return real_snapshot(event)

    monkeypatch.setattr(event_service, "event_snapshot", snapshot_then_race)


class TestRacingWriters:
    """Two sessions acting on the same event at once."""

    def test_accepts_racing_for_last_spot(self, client, session_factory, monkeypatch):
        host = create_test_user(client, name="Host")
        a = create_test_user(client, name="Player A")
        b = create_test_user(client, name="Player B")
        event = create_test_event(client, host["user_id"], event_type="singles")
        req_a = request_to_join(client, event["event_id"], a["user_id"])
        req_b = request_to_join(client, event["event_id"], b["user_id"])

        def accept_a():
            other = session_factory()
            try:
                participation_service.accept_join_request(other, req_a["request_id"], host["user_id"])
            finally:
                other.close()

        _race_after_checks(monkeypatch, accept_a)
        session = session_factory()
        try:
            with pytest.raises(HTTPException) as exc_info:
                participation_service.accept_join_request(session, req_b["request_id"], host["user_id"])
        finally:
            session.close()
        assert exc_info.value.status_code == 409

        data = client.get(f"/api/events/{event['event_id']}").json()
        assert data["participant_ids"] == [a["user_id"]]
        assert data["spots_filled"] == data["spots_total"] == 1
        assert data["status"] == "full"
        requests = client.get(
            f"/api/events/{event['event_id']}/join-requests?actor_user_id={host['user_id']}"
        ).json()
        assert {r["user_id"]: r["status"] for r in requests} == {
            a["user_id"]: "accepted",
            b["user_id"]: "pending",
        }

    def test_decline_beats_racing_accept(self, client, session_factory, monkeypatch):
        host = create_test_user(client, name="Host")
        player = create_test_user(client, name="Player")
        event = create_test_event(client, host["user_id"], event_type="doubles")
        req = request_to_join(client, event["event_id"], player["user_id"])

        def decline():
            other = session_factory()
            try:
                participation_service.decline_join_request(other, req["request_id"], host["user_id"])
            finally:
                other.close()

        _race_after_checks(monkeypatch, decline)
        session = session_factory()
        try:
            with pytest.raises(HTTPException) as exc_info:
                participation_service.accept_join_request(session, req["request_id"], host["user_id"])
        finally:
            session.close()
        assert exc_info.value.status_code == 409

        data = client.get(f"/api/events/{event['event_id']}").json()
        assert data["participant_ids"] == []
        assert data["spots_filled"] == 0
        assert data["version"] == 2
        assert client.get(f"/api/calendar/{player['user_id']}").json() == []
        requests = client.get(
            f"/api/events/{event['event_id']}/join-requests?actor_user_id={host['user_id']}"
        ).json()
        assert [r["status"] for r in requests] == ["declined"]
