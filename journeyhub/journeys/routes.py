from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from journeyhub.core.deps import get_acting_user_id
from journeyhub.db.session import get_db
from journeyhub.journeys import service
from journeyhub.journeys.aggregation import MonthlyDistanceFilter, monthly_distances
from journeyhub.journeys.query import JourneyFilter, JourneySort, PageRequest, filter_journeys
from journeyhub.journeys.schemas import AddJourneyRequest, ShareJourneyRequest
from journeyhub.journeys.serializers import journey_to_dict, monthly_to_dict
from journeyhub.links import service as links_service
from journeyhub.shares import service as shares_service

router = APIRouter(prefix="/api/journeys", tags=["journeys"])


# ======================================================
# ADMIN: FILTERED LISTING + MONTHLY DISTANCES
# ======================================================
@router.get("/admin/journeys")
def list_journeys_filtered(
    user_id: Optional[str] = Query(None),
    transport_type: Optional[List[str]] = Query(None),
    start_date_from: Optional[datetime] = Query(None),
    arrival_date_to: Optional[datetime] = Query(None),
    order_by: Optional[str] = Query(None),
    direction: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500),
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    result = filter_journeys(
        db,
        JourneyFilter(
            user_id=user_id,
            transport_types=transport_type or [],
            start_from=start_date_from,
            arrival_to=arrival_date_to,
        ),
        JourneySort(field=order_by, direction=direction),
        PageRequest(page=page, page_size=page_size),
    )
    return {
        "items": [journey_to_dict(j) for j in result.items],
        "total_count": result.total_count,
    }


@router.get("/admin/monthly-distances")
def list_monthly_distances(
    user_id: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    order_by: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=500),
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    rows = monthly_distances(
        db,
        MonthlyDistanceFilter(user_id=user_id, year=year, month=month, order_by=order_by),
        PageRequest(page=page, page_size=page_size),
    )
    return [monthly_to_dict(r) for r in rows]


# ======================================================
# PUBLIC LINK CONSUMPTION
# ======================================================
@router.get("/public/{token}")
def get_public_journey(token: str, db: Session = Depends(get_db)):
    journey = links_service.consume_public_link(db, token)
    return journey_to_dict(journey)


# ======================================================
# JOURNEY CRUD
# ======================================================
@router.post("")
def add_journey(
    request: AddJourneyRequest,
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    journey_id = service.add_journey(
        db,
        acting_user_id,
        service.NewJourney(
            starting_location=request.starting_location,
            arrival_location=request.arrival_location,
            start_time=request.start_time,
            arrival_time=request.arrival_time,
            transportation_type=request.transportation_type,
            route_distance_km=request.route_distance_km,
        ),
    )
    return {"id": journey_id}


@router.get("")
def list_my_journeys(
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    journeys = service.list_journeys_for_user(db, acting_user_id)
    return [journey_to_dict(j) for j in journeys]


@router.get("/{journey_id}")
def get_journey(
    journey_id: str,
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    return journey_to_dict(service.get_journey(db, journey_id))


@router.delete("/{journey_id}", status_code=204)
def delete_journey(
    journey_id: str,
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    service.delete_journey(db, journey_id)
    return Response(status_code=204)


# ======================================================
# SHARING + PUBLIC LINK MANAGEMENT
# ======================================================
@router.post("/{journey_id}/share")
def share_journey(
    journey_id: str,
    request: ShareJourneyRequest,
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    result = shares_service.share_journey(db, journey_id, acting_user_id, request.user_ids)
    return {
        "created_share_ids": result.created_share_ids,
        "shared_with_user_ids": result.shared_with_user_ids,
    }


@router.post("/{journey_id}/public-link")
def create_public_link(
    journey_id: str,
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    link = links_service.create_public_link(db, journey_id)
    return {"token": link.token, "url": link.url}


@router.put("/{journey_id}/public-link", status_code=204)
def revoke_public_link(
    journey_id: str,
    db: Session = Depends(get_db),
    acting_user_id: str = Depends(get_acting_user_id),
):
    links_service.revoke_public_link(db, journey_id, acting_user_id)
    return Response(status_code=204)
