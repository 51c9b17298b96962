from datetime import date

import pytest

from src.planner.models.domain import Customer, PlanEntry
from src.planner.persistence.memory import InMemoryCustomerStore, InMemoryPlanStore
from src.planner.services.geospatial import haversine_km
from src.planner.services.routing.models import Point, Stop
from src.planner.services.routing.sequencer import nearest_neighbor_order, sequence_stops
from src.planner.services.routing.service import build_daily_route

DEPOT = Point(34.0, 132.0)


def _customer(cid: str, lat: float | None, lon: float | None) -> Customer:
    return Customer(customer_id=cid, name=f"Customer {cid}", latitude=lat, longitude=lon)


def test_haversine_one_degree_of_latitude():
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)
    assert haversine_km(34.0, 132.0, 34.0, 132.0) == 0.0


def test_nearest_neighbor_picks_closest_stop_first():
    stops = [Stop("B", 34.00, 132.05), Stop("A", 34.01, 132.00)]

    ordered = nearest_neighbor_order(DEPOT, stops)

    assert [stop.stop_id for stop in ordered] == ["A", "B"]


def test_nearest_neighbor_breaks_ties_by_input_order():
    stops = [Stop("N", 34.01, 132.0), Stop("S", 33.99, 132.0)]

    assert [stop.stop_id for stop in nearest_neighbor_order(DEPOT, stops)] == ["N", "S"]


def test_sequence_stops_reports_legs_and_total():
    a, b = Stop("A", 34.01, 132.00), Stop("B", 34.00, 132.05)

    route = sequence_stops(DEPOT, [b, a])

    first_leg = haversine_km(34.0, 132.0, 34.01, 132.00)
    second_leg = haversine_km(34.01, 132.00, 34.00, 132.05)
    assert [stop.sequence for stop in route.stops] == [1, 2]
    assert route.stops[0].distance_from_prev_km == pytest.approx(first_leg)
    assert route.stops[1].distance_from_prev_km == pytest.approx(second_leg)
    assert route.total_distance_km == round(first_leg + second_leg, 3)


def test_sequence_stops_with_return_leg():
    a, b = Stop("A", 34.01, 132.00), Stop("B", 34.00, 132.05)

    one_way = sequence_stops(DEPOT, [a, b])
    round_trip = sequence_stops(DEPOT, [a, b], return_to_depot=True)

    back = haversine_km(34.00, 132.05, 34.0, 132.0)
    assert round_trip.returns_to_depot is True
    assert round_trip.total_distance_km == pytest.approx(one_way.total_distance_km + back, abs=0.002)


def test_sequence_stops_empty():
    route = sequence_stops(DEPOT, [], return_to_depot=True)

    assert route.stops == []
    assert route.total_distance_km == 0.0


def test_build_daily_route_collects_window_and_orders_stops():
    customers = InMemoryCustomerStore(
        [
            _customer("A", 34.01, 132.00),
            _customer("B", 34.00, 132.05),
            _customer("C", 35.00, 133.00),
            _customer("NOGEO", None, None),
        ]
    )
    plans = InMemoryPlanStore(
        [
            PlanEntry("B", date(2025, 3, 10)),
            PlanEntry("A", date(2025, 3, 12)),
            PlanEntry("A", date(2025, 3, 9)),
            PlanEntry("NOGEO", date(2025, 3, 10)),
            PlanEntry("C", date(2025, 3, 20)),
            PlanEntry("GHOST", date(2025, 3, 10)),
        ]
    )

    result = build_daily_route(plans, customers, date(2025, 3, 10), window_days=3, depot=DEPOT)

    assert result.window_start == date(2025, 3, 7)
    assert result.window_end == date(2025, 3, 13)
    assert [stop.stop_id for stop in result.route.stops] == ["A", "B"]
    assert [visit.customer_id for visit in result.visits] == ["A", "B"]
    assert result.visits[0].planned_date == date(2025, 3, 9)
    assert [visit.customer_id for visit in result.unresolved] == ["NOGEO"]


def test_build_daily_route_starts_at_first_stop_without_depot(monkeypatch):
    from src.planner.config import settings

    monkeypatch.setattr(settings, "depot_latitude", None)
    monkeypatch.setattr(settings, "depot_longitude", None)
    customers = InMemoryCustomerStore([_customer("A", 34.01, 132.00), _customer("B", 34.00, 132.05)])
    plans = InMemoryPlanStore([PlanEntry("B", date(2025, 3, 9)), PlanEntry("A", date(2025, 3, 10))])

    result = build_daily_route(plans, customers, date(2025, 3, 10), window_days=1)

    assert result.route.depot == Point(34.00, 132.05)
    assert [stop.stop_id for stop in result.route.stops] == ["B", "A"]
    assert result.route.stops[0].distance_from_prev_km == 0.0
