from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journeyhub.core import exceptions as exc
from journeyhub.core.timeutil import to_naive_utc
from journeyhub.journeys import repo
from journeyhub.journeys.models import Journey
from journeyhub.links import repo as links_repo
from journeyhub.shares import repo as shares_repo
from journeyhub.users import repo as users_repo


@dataclass
class NewJourney:
    starting_location: str
    arrival_location: str
    start_time: datetime
    arrival_time: datetime
    transportation_type: str
    route_distance_km: Decimal


def add_journey(db: Session, user_id: str, data: NewJourney) -> str:
    """Create a journey for an existing user. Returns the new journey id."""
    if users_repo.get_user(db, user_id) is None:
        raise exc.NotFoundError(exc.USER_NOT_FOUND)

    start_time = to_naive_utc(data.start_time)
    if repo.find_by_user_and_start_time(db, user_id, start_time) is not None:
        raise exc.ConflictError(exc.JOURNEY_ALREADY_EXISTS)

    journey = Journey(
        user_id=user_id,
        starting_location=data.starting_location,
        arrival_location=data.arrival_location,
        start_time=start_time,
        arrival_time=to_naive_utc(data.arrival_time),
        transportation_type=data.transportation_type,
        route_distance_km=data.route_distance_km,
        is_daily_goal_achieved=False,
    )
    try:
        journey_id = repo.add_journey(db, journey)
    except IntegrityError:
        # Lost the race against a concurrent insert with the same start time
        db.rollback()
        raise exc.ConflictError(exc.JOURNEY_ALREADY_EXISTS)

    print(f"[JOURNEY] created id={journey_id} user={user_id}", flush=True)
    return journey_id


def get_journey(db: Session, journey_id: str) -> Journey:
    journey = repo.get_journey(db, journey_id)
    if journey is None:
        raise exc.NotFoundError(exc.JOURNEY_NOT_FOUND)
    return journey


def list_journeys_for_user(db: Session, user_id: str) -> List[Journey]:
    if users_repo.get_user(db, user_id) is None:
        raise exc.NotFoundError(exc.USER_NOT_FOUND)
    return repo.list_by_user(db, user_id)


def delete_journey(db: Session, journey_id: str) -> None:
    """Delete a journey together with its public links and shares."""
    journey = get_journey(db, journey_id)

    if journey.public_links:
        links_repo.delete_all(db, list(journey.public_links))
    if journey.shares:
        shares_repo.delete_all(db, list(journey.shares))

    repo.remove_journey(db, journey)
    print(f"[JOURNEY] deleted id={journey_id}", flush=True)
