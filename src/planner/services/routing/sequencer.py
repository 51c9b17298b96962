"""Greedy nearest-neighbour stop sequencing."""

from __future__ import annotations

from typing import Sequence

from ..geospatial import haversine_km
from .models import Point, RouteSequence, RouteStop, Stop


def _distance(a: Point | Stop, b: Point | Stop) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def nearest_neighbor_order(depot: Point, stops: Sequence[Stop]) -> list[Stop]:
    """Visit the closest unvisited stop next, starting from the depot.

    Ties go to the stop listed first. No improvement pass is applied.
    """

    remaining = list(stops)
    ordered: list[Stop] = []
    current: Point | Stop = depot
    while remaining:
        best_index = min(range(len(remaining)), key=lambda i: _distance(current, remaining[i]))
        current = remaining.pop(best_index)
        ordered.append(current)
    return ordered


def sequence_stops(depot: Point, stops: Sequence[Stop], *, return_to_depot: bool = False) -> RouteSequence:
    ordered = nearest_neighbor_order(depot, stops)

    route_stops: list[RouteStop] = []
    total = 0.0
    previous: Point | Stop = depot
    for sequence, stop in enumerate(ordered, start=1):
        leg = _distance(previous, stop)
        total += leg
        route_stops.append(
            RouteStop(
                stop_id=stop.stop_id,
                sequence=sequence,
                latitude=stop.latitude,
                longitude=stop.longitude,
                distance_from_prev_km=leg,
            )
        )
        previous = stop
    if return_to_depot and ordered:
        total += _distance(previous, depot)

    return RouteSequence(
        depot=depot,
        stops=route_stops,
        total_distance_km=round(total, 3),
        returns_to_depot=return_to_depot,
    )
