import os
from datetime import datetime
from decimal import Decimal

import pytest

# Must be set before journeyhub.db.base (and the app) are imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DAILY_GOAL_WORKER_ENABLED"] = "0"
os.environ.pop("EVENT_WEBHOOK_URL", None)

from fastapi.testclient import TestClient  # noqa: E402

from journeyhub.db.base import Base, engine, SessionLocal  # noqa: E402
from journeyhub.db import models  # noqa: E402,F401
from journeyhub.events.publisher import EventPublisher  # noqa: E402
from journeyhub.journeys.models import Journey  # noqa: E402
from journeyhub.main import app  # noqa: E402
from journeyhub.users.models import User  # noqa: E402


class RecordingPublisher(EventPublisher):
    def __init__(self):
        self.events = []

    def publish(self, event_name, payload, stop_event=None):
        self.events.append((event_name, payload))


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(username=None):
        counter["n"] += 1
        name = username or f"user{counter['n']}"
        user = User(email=f"{name}@example.com", username=name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_journey(db):
    def _make(user_id, start, arrival=None, distance="10", transport="car",
              starting_location="Home", arrival_location="Work"):
        journey = Journey(
            user_id=user_id,
            starting_location=starting_location,
            arrival_location=arrival_location,
            start_time=start,
            arrival_time=arrival or start,
            transportation_type=transport,
            route_distance_km=Decimal(str(distance)),
            is_daily_goal_achieved=False,
        )
        db.add(journey)
        db.commit()
        db.refresh(journey)
        return journey

    return _make


def at(day, hour, minute=0):
    """Shorthand for a naive UTC datetime on 2026-10-<day>."""
    return datetime(2026, 10, day, hour, minute)
