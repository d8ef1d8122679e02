"""
Journey listing: filter -> count -> order -> page.

Sortable fields are a closed table; a name that is not in it falls back to
start_time ascending instead of being looked up on the model.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from journeyhub.core.timeutil import to_naive_utc
from journeyhub.journeys import repo
from journeyhub.journeys.models import Journey


SORTABLE_FIELDS = {
    "journeyid": Journey.id,
    "id": Journey.id,
    "userid": Journey.user_id,
    "startinglocation": Journey.starting_location,
    "arrivallocation": Journey.arrival_location,
    "starttime": Journey.start_time,
    "arrivaltime": Journey.arrival_time,
    "transportationtype": Journey.transportation_type,
    "routedistancekm": Journey.route_distance_km,
    "isdailygoalachieved": Journey.is_daily_goal_achieved,
}

DEFAULT_SORT_COLUMN = Journey.start_time


@dataclass
class JourneyFilter:
    user_id: Optional[str] = None
    transport_types: List[str] = field(default_factory=list)
    start_from: Optional[datetime] = None
    arrival_to: Optional[datetime] = None


@dataclass
class JourneySort:
    field: Optional[str] = None
    direction: Optional[str] = None


@dataclass
class PageRequest:
    page: int = 1
    page_size: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class JourneyPage:
    items: List[Journey]
    total_count: int


def _normalize_field(name: Optional[str]) -> str:
    return (name or "").strip().lower().replace("_", "")


def resolve_sort(sort: Optional[JourneySort]):
    """Return the ORDER BY clause for a sort request."""
    sort = sort or JourneySort()
    column = SORTABLE_FIELDS.get(_normalize_field(sort.field))
    if column is None:
        return DEFAULT_SORT_COLUMN.asc()

    descending = (sort.direction or "").strip().lower() == "desc"
    return column.desc() if descending else column.asc()


def filter_journeys(
    db: Session,
    filters: Optional[JourneyFilter] = None,
    sort: Optional[JourneySort] = None,
    page: Optional[PageRequest] = None,
) -> JourneyPage:
    filters = filters or JourneyFilter()
    page = page or PageRequest()
    if page.page < 1 or page.page_size < 1:
        raise ValueError("page and page_size must be >= 1")

    # Stored times are naive UTC; aware bounds must be shifted before comparing
    start_from = to_naive_utc(filters.start_from)
    arrival_to = to_naive_utc(filters.arrival_to)

    query = repo.query_journeys(db)

    if filters.user_id is not None:
        query = query.filter(Journey.user_id == filters.user_id)
    if filters.transport_types:
        query = query.filter(Journey.transportation_type.in_(filters.transport_types))
    if start_from is not None:
        query = query.filter(Journey.start_time >= start_from)
    if arrival_to is not None:
        query = query.filter(Journey.arrival_time <= arrival_to)

    # Counted before ordering and paging
    total_count = query.count()

    items = (
        query.order_by(resolve_sort(sort), Journey.id.asc())
        .offset(page.skip)
        .limit(page.page_size)
        .all()
    )
    return JourneyPage(items=items, total_count=total_count)
