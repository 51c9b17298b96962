from datetime import date, timedelta

import pytest

from src.planner.errors import ReconcileInProgressError, StoreUnavailableError
from src.planner.models.domain import Customer, DeliveryRecord, PlanEntry, TankType
from src.planner.persistence.memory import InMemoryCustomerStore, InMemoryOrderStore, InMemoryPlanStore
from src.planner.services.planning import reconciler as reconciler_module
from src.planner.services.planning.reconciler import (
    Classification,
    PlanReconciler,
    purge_plans_for_customer,
)

TODAY = date(2025, 2, 20)
HORIZON_END = TODAY + timedelta(days=370)


def _customer(cid: str, tank: TankType | None = None) -> Customer:
    return Customer(customer_id=cid, name=f"Customer {cid}", tank_type=tank)


def _orders(rows: dict[str, list]) -> InMemoryOrderStore:
    return InMemoryOrderStore(
        DeliveryRecord(customer_id=cid, date=day) for cid, days in rows.items() for day in days
    )


def _future(plans: InMemoryPlanStore, cid: str) -> list[date]:
    return [entry.date for entry in plans.query_by_customer(cid) if entry.date >= TODAY]


def _past(plans: InMemoryPlanStore) -> set[str]:
    return {entry.id for entry in plans.all() if entry.date < TODAY}


@pytest.fixture
def stores():
    customers = InMemoryCustomerStore(
        [
            _customer("NEW1"),
            _customer("FC1"),
            _customer("FB1", TankType.A),
        ]
    )
    orders = _orders(
        {
            "NEW1": ["garbage"],
            "FC1": ["2024-01-05", "2024-02-10", "2024-03-08"],
            "FB1": ["2023-11-20", "2025-01-10"],
        }
    )
    plans = InMemoryPlanStore(
        [
            PlanEntry("NEW1", date(2025, 1, 1)),
            PlanEntry("NEW1", date(2025, 3, 1)),
            PlanEntry("FC1", date(2025, 1, 10)),
            PlanEntry("FC1", date(2025, 6, 1)),
            PlanEntry("FB1", date(2024, 12, 1)),
            PlanEntry("FB1", TODAY),
        ]
    )
    return orders, customers, plans


def _reconciler(stores, **kwargs) -> PlanReconciler:
    orders, customers, plans = stores
    return PlanReconciler(orders, customers, plans, horizon_days=370, max_years_back=3, fallback_cycle_days=42, **kwargs)


def test_reconcile_all_classifies_every_customer(stores):
    report = _reconciler(stores).reconcile_all(today=TODAY)

    by_id = {outcome.customer_id: outcome for outcome in report.outcomes}
    assert report.base_year == 2024
    assert by_id["NEW1"].classification is Classification.NEW
    assert by_id["FC1"].classification is Classification.FORECASTED
    assert by_id["FB1"].classification is Classification.FALLBACK
    assert report.counts() == {"NEW": 1, "FORECASTED": 1, "FALLBACK": 1}


def test_new_customer_loses_future_entries_only(stores):
    _, _, plans = stores
    outcome = _reconciler(stores).reconcile_customer(_customer("NEW1"), TODAY)

    assert outcome.written == 0
    assert outcome.deleted == 1
    assert [entry.date for entry in plans.query_by_customer("NEW1")] == [date(2025, 1, 1)]


def test_forecasted_customer_gets_seasonal_plan(stores):
    _, _, plans = stores
    outcome = _reconciler(stores).reconcile_customer(_customer("FC1"), TODAY)

    assert outcome.classification is Classification.FORECASTED
    assert outcome.deleted == 1
    assert outcome.written == 3
    assert _future(plans, "FC1") == [date(2025, 3, 16), date(2026, 1, 16), date(2026, 2, 14)]
    assert PlanEntry("FC1", date(2025, 1, 10)) in plans.query_by_customer("FC1")


def test_fallback_customer_keeps_phase_of_latest_delivery(stores):
    _, _, plans = stores
    outcome = _reconciler(stores).reconcile_customer(_customer("FB1", TankType.A), TODAY)

    planned = _future(plans, "FB1")
    assert outcome.classification is Classification.FALLBACK
    assert outcome.demoted is False
    # 2025-01-10 + 38 = 2025-02-17 is already past, so the chain starts one cycle later.
    assert planned[0] == date(2025, 3, 27)
    assert all((b - a).days == 38 for a, b in zip(planned, planned[1:]))
    assert planned[-1] <= HORIZON_END < planned[-1] + timedelta(days=38)
    assert TODAY not in planned


def test_reconciliation_never_touches_past_entries(stores):
    _, _, plans = stores
    before = _past(plans)

    _reconciler(stores).reconcile_all(today=TODAY)

    assert _past(plans) == before


def test_reconciliation_is_idempotent(stores):
    _, _, plans = stores
    reconciler = _reconciler(stores)

    reconciler.reconcile_all(today=TODAY)
    first = plans.all()
    reconciler.reconcile_all(today=TODAY)

    assert plans.all() == first


def test_classification_follows_current_history():
    customers = InMemoryCustomerStore([_customer("C1")])
    orders = _orders({"C1": ["2023-04-01"]})
    plans = InMemoryPlanStore()
    reconciler = PlanReconciler(orders, customers, plans)

    assert reconciler.reconcile_customer(_customer("C1"), TODAY).classification is Classification.FALLBACK

    orders.add("C1", "2024-10-15")

    assert reconciler.reconcile_customer(_customer("C1"), TODAY).classification is Classification.FORECASTED


def test_forecast_failure_demotes_customer_and_batch_continues(stores, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(reconciler_module, "build_plan_from_history", broken)
    _, _, plans = stores

    report = _reconciler(stores).reconcile_all(today=TODAY)

    by_id = {outcome.customer_id: outcome for outcome in report.outcomes}
    assert by_id["FC1"].classification is Classification.FALLBACK
    assert by_id["FC1"].demoted is True
    assert "boom" in by_id["FC1"].error
    assert by_id["FB1"].classification is Classification.FALLBACK
    # 2024-03-08 anchored, 42-day cycle (unknown tank type)
    planned = _future(plans, "FC1")
    assert planned and all((b - a).days == 42 for a, b in zip(planned, planned[1:]))
    assert (planned[0] - date(2024, 3, 8)).days % 42 == 0


class FailingPlanStore(InMemoryPlanStore):
    def upsert(self, customer_id, day):
        raise StoreUnavailableError("plans table unreachable")


def test_store_failure_aborts_the_run_and_releases_the_lock(stores):
    orders, customers, _ = stores
    failing = PlanReconciler(orders, customers, FailingPlanStore())

    with pytest.raises(StoreUnavailableError):
        failing.reconcile_all(today=TODAY)

    report = _reconciler(stores).reconcile_all(today=TODAY)
    assert len(report.outcomes) == 3


def test_concurrent_run_is_rejected(stores):
    assert reconciler_module._RUN_LOCK.acquire(blocking=False)
    try:
        with pytest.raises(ReconcileInProgressError):
            _reconciler(stores).reconcile_all(today=TODAY)
    finally:
        reconciler_module._RUN_LOCK.release()


class FakePredictor:
    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def predict_next(self, last_date, cycle_days):
        self.calls.append((last_date, cycle_days))
        return self.answer


def test_remote_prediction_sets_first_fallback_date(stores):
    _, _, plans = stores
    predictor = FakePredictor(date(2025, 3, 1))

    _reconciler(stores, predictor=predictor).reconcile_customer(_customer("FB1", TankType.A), TODAY)

    assert predictor.calls == [(date(2025, 1, 10), 38)]
    assert _future(plans, "FB1")[:2] == [date(2025, 3, 1), date(2025, 4, 8)]


def test_remote_prediction_in_the_past_is_walked_forward(stores):
    _, _, plans = stores
    predictor = FakePredictor(date(2025, 2, 17))

    _reconciler(stores, predictor=predictor).reconcile_customer(_customer("FB1", TankType.A), TODAY)

    assert _future(plans, "FB1")[0] == date(2025, 3, 27)


def test_failed_remote_prediction_uses_local_computation(stores):
    _, _, plans = stores

    _reconciler(stores, predictor=FakePredictor(None)).reconcile_customer(_customer("FB1", TankType.A), TODAY)

    assert _future(plans, "FB1")[0] == date(2025, 3, 27)


def test_forecast_for_customer_does_not_write(stores):
    _, _, plans = stores
    before = plans.all()

    result = _reconciler(stores).forecast_for_customer(_customer("FC1"), TODAY)

    assert result.classification is Classification.FORECASTED
    assert result.forecast.target_year_count == 3
    assert result.planned_dates == [date(2025, 3, 16), date(2026, 1, 16), date(2026, 2, 14)]
    assert plans.all() == before


def test_purge_plans_for_customer_scopes(stores):
    _, _, plans = stores

    assert purge_plans_for_customer(plans, "FC1", scope="future", from_date=TODAY) == 1
    assert [entry.date for entry in plans.query_by_customer("FC1")] == [date(2025, 1, 10)]
    assert purge_plans_for_customer(plans, "FC1", scope="all") == 1
    assert plans.query_by_customer("FC1") == []
    assert purge_plans_for_customer(plans, "FC1") == 0


class RaisingPredictor:
    def predict_next(self, last_date, cycle_days):
        raise RuntimeError("predictor exploded")


def test_raising_predictor_does_not_abort_the_run(stores):
    _, _, plans = stores

    report = _reconciler(stores, predictor=RaisingPredictor()).reconcile_all(today=TODAY)

    assert len(report.outcomes) == 3
    assert report.counts()["FALLBACK"] == 1
    assert _future(plans, "FB1")[0] == date(2025, 3, 27)
