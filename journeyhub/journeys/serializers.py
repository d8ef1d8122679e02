from typing import Optional

from journeyhub.journeys.aggregation import MonthlyDistance
from journeyhub.journeys.models import Journey


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def journey_to_dict(journey: Journey) -> dict:
    return {
        "id": journey.id,
        "user_id": journey.user_id,
        "starting_location": journey.starting_location,
        "arrival_location": journey.arrival_location,
        "start_time": _iso(journey.start_time),
        "arrival_time": _iso(journey.arrival_time),
        "transportation_type": journey.transportation_type,
        "route_distance_km": float(journey.route_distance_km or 0),
        "is_daily_goal_achieved": bool(journey.is_daily_goal_achieved),
    }


def monthly_to_dict(row: MonthlyDistance) -> dict:
    return {
        "user_id": row.user_id,
        "year": row.year,
        "month": row.month,
        "total_distance_km": float(row.total_distance_km),
    }
