"""Pytest fixtures — per-test SQLite database for fast, isolated tests."""
import os
from datetime import datetime, timedelta, timezone

# The app engine is never used by tests; keep it off the real database and stop the scheduler.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENABLE_SCHEDULER", "false")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tennismate.database import Base, enable_sqlite_pragmas, get_db  # noqa: E402
from tennismate.main import app  # noqa: E402

# Import all models so they register with Base.metadata
import tennismate.models  # noqa: E402,F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
    enable_sqlite_pragmas(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session for direct service calls and assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create records via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def next_slot(days: int = 1, hour: int = 10) -> datetime:
    """A future start time on a 30-minute step."""
    day = datetime.now(timezone.utc) + timedelta(days=days)
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)


def create_test_user(client: TestClient, name: str = "Test User", tz: str = "UTC") -> dict:
    """Helper — POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={
        "display_name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "default_timezone": tz,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, host_id: str, event_type: str = "doubles",
                      spots_total: int | None = None, title: str = "Sunday Hit",
                      start: datetime | None = None) -> dict:
    """Helper — POST /api/events and return response JSON."""
    payload = {
        "host_id": host_id,
        "title": title,
        "event_type": event_type,
        "location": "Centennial Park Courts",
        "start_time_utc": (start or next_slot()).isoformat(),
        "duration_mins": 90,
    }
    if spots_total is not None:
        payload["spots_total"] = spots_total
    resp = client.post("/api/events/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def request_to_join(client: TestClient, event_id: str, user_id: str) -> dict:
    resp = client.post(f"/api/events/{event_id}/join-requests", json={"user_id": user_id})
    assert resp.status_code == 201, resp.text
    return resp.json()


def accept(client: TestClient, request_id: str, host_id: str):
    return client.post(f"/api/join-requests/{request_id}/accept", json={"actor_user_id": host_id})


def join_and_accept(client: TestClient, event: dict, user: dict) -> dict:
    """Helper — request + host accept; returns the accepted request JSON."""
    req = request_to_join(client, event["event_id"], user["user_id"])
    resp = accept(client, req["request_id"], event["host_id"])
    assert resp.status_code == 200, resp.text
    return resp.json()
