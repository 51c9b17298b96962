"""Routing request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class DepotModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DailyRouteRequest(BaseModel):
    day: Optional[date] = Field(default=None, description="Route day. Defaults to today.")
    window_days: Optional[int] = Field(default=None, ge=0, description="Days either side of the route day.")
    depot: Optional[DepotModel] = Field(
        default=None,
        description="Start point. Falls back to the configured depot, then to the first stop.",
    )
    return_to_depot: bool = False


class RouteStopModel(BaseModel):
    customer_id: str
    name: str
    planned_date: date
    sequence: int
    latitude: float
    longitude: float
    distance_from_prev_km: float


class UnresolvedStopModel(BaseModel):
    customer_id: str
    name: str
    planned_date: date


class DailyRouteResponse(BaseModel):
    day: date
    window_start: date
    window_end: date
    depot: DepotModel
    total_distance_km: float
    returns_to_depot: bool
    stops: List[RouteStopModel]
    unresolved: List[UnresolvedStopModel]
