"""Daily route orchestration over the plan store."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from ...config import settings
from ...persistence.stores import CustomerStore, PlanStore
from .models import DailyRoute, DailyStop, Point, Stop
from .sequencer import sequence_stops

logger = logging.getLogger(__name__)


def build_daily_route(
    plans: PlanStore,
    customers: CustomerStore,
    day: date,
    *,
    window_days: int | None = None,
    depot: Point | None = None,
    return_to_depot: bool = False,
) -> DailyRoute:
    """Order the customers planned within ``window_days`` of ``day``.

    A customer planned more than once in the window is visited once, under
    its earliest planned date. Customers without geocoded coordinates are
    reported as unresolved and left out of the route. Without a configured
    depot the route starts at the first resolved stop.
    """

    window_days = settings.route_window_days if window_days is None else window_days
    start = day - timedelta(days=window_days)
    end = day + timedelta(days=window_days)

    earliest: dict[str, date] = {}
    for entry in plans.query_between(start, end):
        current = earliest.get(entry.customer_id)
        if current is None or entry.date < current:
            earliest[entry.customer_id] = entry.date

    visits: list[DailyStop] = []
    unresolved: list[DailyStop] = []
    stops: list[Stop] = []
    for customer_id, planned_date in sorted(earliest.items(), key=lambda item: (item[1], item[0])):
        customer = customers.get(customer_id)
        if customer is None:
            logger.warning(f"Plan entry references unknown customer {customer_id}")
            continue
        visit = DailyStop(customer_id=customer_id, name=customer.name, planned_date=planned_date)
        if not customer.has_coordinates:
            unresolved.append(visit)
            continue
        visits.append(visit)
        stops.append(Stop(stop_id=customer_id, latitude=customer.latitude, longitude=customer.longitude))

    if depot is None and settings.depot is not None:
        depot = Point(*settings.depot)
    if depot is None:
        depot = Point(stops[0].latitude, stops[0].longitude) if stops else Point(0.0, 0.0)

    route = sequence_stops(depot, stops, return_to_depot=return_to_depot)
    order = {stop.stop_id: stop.sequence for stop in route.stops}
    visits.sort(key=lambda visit: order[visit.customer_id])

    return DailyRoute(
        day=day,
        window_start=start,
        window_end=end,
        route=route,
        visits=visits,
        unresolved=unresolved,
    )
