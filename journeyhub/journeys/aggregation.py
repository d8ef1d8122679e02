"""
Monthly distance totals per user.

Staged: filter -> group + sum -> order -> slice. Grouping and ordering always
run over the full filtered set so that page N is a cut of the complete
ordered sequence.
"""
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import extract
from sqlalchemy.orm import Session

from journeyhub.core.timeutil import month_bounds, year_bounds
from journeyhub.journeys import repo
from journeyhub.journeys.models import Journey
from journeyhub.journeys.query import PageRequest


@dataclass
class MonthlyDistanceFilter:
    user_id: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    order_by: Optional[str] = None


@dataclass
class MonthlyDistance:
    user_id: str
    year: int
    month: int
    total_distance_km: Decimal


def group_monthly(journeys: Iterable[Journey]) -> List[MonthlyDistance]:
    """Group by (user, year, month) in encounter order, summing distances."""
    groups: "OrderedDict[tuple, MonthlyDistance]" = OrderedDict()
    for journey in journeys:
        key = (journey.user_id, journey.start_time.year, journey.start_time.month)
        group = groups.get(key)
        if group is None:
            group = MonthlyDistance(
                user_id=key[0], year=key[1], month=key[2], total_distance_km=Decimal("0")
            )
            groups[key] = group
        group.total_distance_km += Decimal(journey.route_distance_km or 0)
    return list(groups.values())


def order_monthly(rows: List[MonthlyDistance], order_by: Optional[str]) -> List[MonthlyDistance]:
    # sorted() is stable: ties keep encounter order
    if (order_by or "").strip().lower() == "userid":
        return sorted(rows, key=lambda r: r.user_id)
    return sorted(rows, key=lambda r: r.total_distance_km, reverse=True)


def monthly_distances(
    db: Session,
    filters: Optional[MonthlyDistanceFilter] = None,
    page: Optional[PageRequest] = None,
) -> List[MonthlyDistance]:
    filters = filters or MonthlyDistanceFilter()
    page = page or PageRequest()
    if page.page < 1 or page.page_size < 1:
        raise ValueError("page and page_size must be >= 1")

    query = repo.query_journeys(db)
    if filters.user_id is not None:
        query = query.filter(Journey.user_id == filters.user_id)

    if filters.year is not None:
        if filters.month is not None:
            start, end = month_bounds(filters.year, filters.month)
        else:
            start, end = year_bounds(filters.year)
        query = query.filter(Journey.start_time >= start, Journey.start_time < end)
    elif filters.month is not None:
        # Same month in every year
        query = query.filter(extract("month", Journey.start_time) == filters.month)

    journeys = query.order_by(Journey.start_time.asc(), Journey.id.asc()).all()

    ordered = order_monthly(group_monthly(journeys), filters.order_by)
    return ordered[page.skip:page.skip + page.page_size]
