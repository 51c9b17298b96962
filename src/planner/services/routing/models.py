"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass(frozen=True, slots=True)
class Point:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Stop:
    stop_id: str
    latitude: float
    longitude: float


@dataclass(slots=True)
class RouteStop:
    stop_id: str
    sequence: int
    latitude: float
    longitude: float
    distance_from_prev_km: float


@dataclass(slots=True)
class RouteSequence:
    depot: Point
    stops: List[RouteStop]
    total_distance_km: float
    returns_to_depot: bool = False


@dataclass(slots=True)
class DailyStop:
    customer_id: str
    name: str
    planned_date: date


@dataclass(slots=True)
class DailyRoute:
    day: date
    window_start: date
    window_end: date
    route: RouteSequence
    visits: List[DailyStop] = field(default_factory=list)
    unresolved: List[DailyStop] = field(default_factory=list)
