"""Stop sequencing for a day's planned deliveries."""

from .models import Point, RouteSequence, RouteStop, Stop
from .sequencer import nearest_neighbor_order, sequence_stops
from .service import build_daily_route

__all__ = [
    "Point",
    "Stop",
    "RouteStop",
    "RouteSequence",
    "nearest_neighbor_order",
    "sequence_stops",
    "build_daily_route",
]
