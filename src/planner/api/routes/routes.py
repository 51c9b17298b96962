"""Daily route endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import StoreUnavailableError
from ...schemas.routing import (
    DailyRouteRequest,
    DailyRouteResponse,
    DepotModel,
    RouteStopModel,
    UnresolvedStopModel,
)
from ...services.dates import business_today
from ...services.routing.models import Point
from ...services.routing.service import build_daily_route
from ..dependencies import Stores, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/daily", response_model=DailyRouteResponse, status_code=status.HTTP_200_OK)
def daily_route(
    payload: Optional[DailyRouteRequest] = None,
    stores: Stores = Depends(get_stores),
) -> DailyRouteResponse:
    payload = payload or DailyRouteRequest()
    depot = Point(payload.depot.latitude, payload.depot.longitude) if payload.depot else None
    try:
        result = build_daily_route(
            stores.plans,
            stores.customers,
            payload.day or business_today(),
            window_days=payload.window_days,
            depot=depot,
            return_to_depot=payload.return_to_depot,
        )
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    visits = {visit.customer_id: visit for visit in result.visits}
    return DailyRouteResponse(
        day=result.day,
        window_start=result.window_start,
        window_end=result.window_end,
        depot=DepotModel(latitude=result.route.depot.latitude, longitude=result.route.depot.longitude),
        total_distance_km=result.route.total_distance_km,
        returns_to_depot=result.route.returns_to_depot,
        stops=[
            RouteStopModel(
                customer_id=stop.stop_id,
                name=visits[stop.stop_id].name,
                planned_date=visits[stop.stop_id].planned_date,
                sequence=stop.sequence,
                latitude=stop.latitude,
                longitude=stop.longitude,
                distance_from_prev_km=stop.distance_from_prev_km,
            )
            for stop in result.route.stops
        ],
        unresolved=[
            UnresolvedStopModel(customer_id=v.customer_id, name=v.name, planned_date=v.planned_date)
            for v in result.unresolved
        ],
    )
