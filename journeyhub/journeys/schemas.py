from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field


class AddJourneyRequest(BaseModel):
    starting_location: str
    arrival_location: str
    start_time: datetime
    arrival_time: datetime
    transportation_type: str
    route_distance_km: Decimal = Field(..., ge=0)


class ShareJourneyRequest(BaseModel):
    user_ids: List[str] = Field(default_factory=list)
