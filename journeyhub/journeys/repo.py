"""
Journey storage helpers. Every write commits, like the rest of the repos.
"""
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Query, Session

from journeyhub.core.timeutil import day_bounds
from journeyhub.journeys.models import Journey


def add_journey(db: Session, journey: Journey) -> str:
    db.add(journey)
    db.commit()
    db.refresh(journey)
    return journey.id


def get_journey(db: Session, journey_id: str) -> Optional[Journey]:
    return db.query(Journey).filter(Journey.id == journey_id).first()


def remove_journey(db: Session, journey: Journey) -> None:
    db.delete(journey)
    db.commit()


def find_by_user_and_start_time(db: Session, user_id: str, start_time: datetime) -> Optional[Journey]:
    return (
        db.query(Journey)
        .filter(Journey.user_id == user_id, Journey.start_time == start_time)
        .first()
    )


def list_by_user(db: Session, user_id: str) -> List[Journey]:
    return (
        db.query(Journey)
        .filter(Journey.user_id == user_id)
        .order_by(Journey.start_time.asc(), Journey.id.asc())
        .all()
    )


def query_journeys(db: Session) -> Query:
    """Unfiltered query over all journeys; callers narrow it down."""
    return db.query(Journey)


def list_for_date(db: Session, day: date) -> List[Journey]:
    """Journeys whose start_time falls on the given UTC calendar day."""
    start, end = day_bounds(day)
    return (
        db.query(Journey)
        .filter(Journey.start_time >= start, Journey.start_time < end)
        .all()
    )
