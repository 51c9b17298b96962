"""Plan reconciliation: rebuild each customer's future plan entries.

Every run classifies each customer from its current delivery history; the
classification is never stored, so backfilled or corrected history changes
the next run's behaviour without any manual reset.

    NEW         no delivery ever recorded -> future entries removed
    FORECASTED  deliveries in the base year -> seasonal forecast
    FALLBACK    history, but none in the base year (or the forecast
                failed) -> fixed tank cycle, phase-aligned on the
                latest delivery

Entries dated before ``today`` are never touched by a run.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, Optional

from ...config import settings
from ...errors import ForecastComputationError, ReconcileInProgressError
from ...models.domain import Customer, ForecastResult
from ...persistence.stores import CustomerStore, OrderStore, PlanStore
from ..dates import business_today
from ..forecast.fallback import cycle_days_for_tank, step_past, year_phase_aligned
from ..forecast.history import clean_dates
from ..forecast.horizon import build_plan_from_history
from .predict_client import PredictNextClient

logger = logging.getLogger(__name__)

# At most one reconciliation pass may run per process.
_RUN_LOCK = threading.Lock()


class Classification(str, Enum):
    NEW = "NEW"
    FORECASTED = "FORECASTED"
    FALLBACK = "FALLBACK"


@dataclass(slots=True)
class ReconcileOutcome:
    customer_id: str
    classification: Classification
    written: int = 0
    deleted: int = 0
    demoted: bool = False
    error: Optional[str] = None


@dataclass(slots=True)
class ReconcileReport:
    today: date
    base_year: int
    outcomes: list[ReconcileOutcome] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        counts = {c.value: 0 for c in Classification}
        for outcome in self.outcomes:
            counts[outcome.classification.value] += 1
        return counts


@dataclass(slots=True)
class CustomerForecast:
    """Dry-run result for one customer; nothing is written."""

    customer_id: str
    classification: Classification
    planned_dates: list[date]
    forecast: Optional[ForecastResult] = None
    cycle_days: Optional[int] = None
    demoted: bool = False
    error: Optional[str] = None


def purge_plans_for_customer(
    plans: PlanStore,
    customer_id: str,
    scope: Literal["all", "future"] = "all",
    from_date: date | None = None,
) -> int:
    """Delete a customer's plan entries, all of them or those on/after ``from_date``."""

    entries = plans.query_by_customer(customer_id)
    if scope == "future":
        cutoff = from_date or business_today()
        entries = [entry for entry in entries if entry.date >= cutoff]
    if not entries:
        return 0
    return plans.bulk_delete([entry.id for entry in entries])


class PlanReconciler:
    def __init__(
        self,
        orders: OrderStore,
        customers: CustomerStore,
        plans: PlanStore,
        *,
        horizon_days: int | None = None,
        max_years_back: int | None = None,
        fallback_cycle_days: int | None = None,
        predictor: PredictNextClient | None = None,
    ) -> None:
        self.orders = orders
        self.customers = customers
        self.plans = plans
        self.horizon_days = horizon_days if horizon_days is not None else settings.horizon_days
        self.max_years_back = max_years_back if max_years_back is not None else settings.max_years_back
        self.fallback_cycle_days = (
            fallback_cycle_days if fallback_cycle_days is not None else settings.fallback_cycle_days
        )
        self.predictor = predictor

    def _history(self, customer_id: str) -> list[date]:
        return sorted(clean_dates(record.date for record in self.orders.list_by_customer(customer_id)))

    def _fallback_dates(self, customer: Customer, history: list[date], today: date) -> tuple[int, list[date]]:
        cycle = cycle_days_for_tank(customer.tank_type, self.fallback_cycle_days)
        anchor = history[-1]
        first = None
        if self.predictor is not None:
            try:
                first = self.predictor.predict_next(anchor, cycle)
            except Exception as exc:
                logger.warning(f"Customer {customer.customer_id}: predictor failed ({exc}); using local cycle")
                first = None
            if first is not None and first <= today:
                first = step_past(first, cycle, today)
        dates = year_phase_aligned(
            today,
            cycle,
            last_date=anchor,
            horizon_days=self.horizon_days,
            first=first,
        )
        return cycle, dates

    def _forecast(self, history: list[date], today: date) -> ForecastResult:
        try:
            return build_plan_from_history(
                history,
                today.year - 1,
                today,
                self.horizon_days,
                years_back=self.max_years_back,
            )
        except Exception as exc:
            raise ForecastComputationError(f"Forecast failed: {exc}") from exc

    def forecast_for_customer(self, customer: Customer, today: date | None = None) -> CustomerForecast:
        """Compute what a run would write for ``customer`` without touching the plan store."""

        today = today or business_today()
        base_year = today.year - 1
        history = self._history(customer.customer_id)

        if not history:
            return CustomerForecast(customer.customer_id, Classification.NEW, [])

        error = None
        if any(day.year == base_year for day in history):
            try:
                forecast = self._forecast(history, today)
                planned = [day for day in forecast.planned_dates if day >= today]
                return CustomerForecast(customer.customer_id, Classification.FORECASTED, planned, forecast=forecast)
            except ForecastComputationError as exc:
                logger.warning(f"Customer {customer.customer_id}: {exc}; falling back to fixed cycle")
                error = str(exc)

        cycle, dates = self._fallback_dates(customer, history, today)
        return CustomerForecast(
            customer.customer_id,
            Classification.FALLBACK,
            dates,
            cycle_days=cycle,
            demoted=error is not None,
            error=error,
        )

    def reconcile_customer(self, customer: Customer, today: date | None = None) -> ReconcileOutcome:
        """Replace the customer's entries dated ``today`` or later with a fresh plan."""

        today = today or business_today()
        result = self.forecast_for_customer(customer, today)

        deleted = purge_plans_for_customer(self.plans, customer.customer_id, scope="future", from_date=today)
        for day in result.planned_dates:
            self.plans.upsert(customer.customer_id, day)

        return ReconcileOutcome(
            customer_id=customer.customer_id,
            classification=result.classification,
            written=len(result.planned_dates),
            deleted=deleted,
            demoted=result.demoted,
            error=result.error,
        )

    def reconcile_all(self, today: date | None = None) -> ReconcileReport:
        """Reconcile every customer in turn.

        Forecast failures only demote the affected customer. Store failures
        propagate and abort the run; customers already processed keep their
        new entries.

        Raises:
            ReconcileInProgressError: another run holds the process lock.
            StoreUnavailableError: a store could not be read or written.
        """

        if not _RUN_LOCK.acquire(blocking=False):
            raise ReconcileInProgressError("A reconciliation run is already in progress.")
        try:
            today = today or business_today()
            report = ReconcileReport(today=today, base_year=today.year - 1)
            for customer in self.customers.list():
                report.outcomes.append(self.reconcile_customer(customer, today))
            logger.info(f"Reconciled {len(report.outcomes)} customers for {today.isoformat()}: {report.counts()}")
            return report
        finally:
            _RUN_LOCK.release()
