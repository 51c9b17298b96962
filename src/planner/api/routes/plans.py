"""Plan reconciliation endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...errors import ReconcileInProgressError, StoreUnavailableError
from ...schemas.planning import (
    CustomerForecastModel,
    PlanEntryModel,
    PlanSummaryModel,
    PurgeResponse,
    ReconcileOutcomeModel,
    ReconcileReportModel,
    ReconcileRequest,
)
from ...services.forecast.summary import summarize_planned_dates
from ...services.planning.reconciler import PlanReconciler, purge_plans_for_customer
from ..dependencies import Stores, get_reconciler, get_stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plans", tags=["plans"])


def _store_error(exc: StoreUnavailableError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.post("/reconcile", response_model=ReconcileReportModel, status_code=status.HTTP_200_OK)
def reconcile(
    payload: Optional[ReconcileRequest] = None,
    reconciler: PlanReconciler = Depends(get_reconciler),
) -> ReconcileReportModel:
    try:
        report = reconciler.reconcile_all(today=payload.today if payload else None)
    except ReconcileInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise _store_error(exc) from exc

    return ReconcileReportModel(
        today=report.today,
        base_year=report.base_year,
        counts=report.counts(),
        outcomes=[
            ReconcileOutcomeModel(**{**asdict(outcome), "classification": outcome.classification.value})
            for outcome in report.outcomes
        ],
    )


@router.get("/{customer_id}", response_model=List[PlanEntryModel])
def list_plans(customer_id: str, stores: Stores = Depends(get_stores)) -> List[PlanEntryModel]:
    try:
        entries = stores.plans.query_by_customer(customer_id)
    except StoreUnavailableError as exc:
        raise _store_error(exc) from exc
    return [PlanEntryModel(id=entry.id, customer_id=entry.customer_id, date_iso=entry.date) for entry in entries]


@router.get("/{customer_id}/forecast", response_model=CustomerForecastModel)
def forecast(
    customer_id: str,
    today: Optional[date] = Query(default=None),
    stores: Stores = Depends(get_stores),
    reconciler: PlanReconciler = Depends(get_reconciler),
) -> CustomerForecastModel:
    """Preview the dates a reconciliation run would write for one customer."""
    try:
        customer = stores.customers.get(customer_id)
        if customer is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Customer {customer_id} not found")
        result = reconciler.forecast_for_customer(customer, today)
    except StoreUnavailableError as exc:
        raise _store_error(exc) from exc

    summary = summarize_planned_dates(result.planned_dates)
    return CustomerForecastModel(
        customer_id=result.customer_id,
        classification=result.classification.value,
        planned_dates=result.planned_dates,
        target_year_count=result.forecast.target_year_count if result.forecast else None,
        monthly_counts=result.forecast.monthly_counts if result.forecast else None,
        cycle_days=result.cycle_days,
        demoted=result.demoted,
        error=result.error,
        summary=PlanSummaryModel(**asdict(summary)) if summary else None,
    )


@router.delete("/{customer_id}", response_model=PurgeResponse)
def purge(
    customer_id: str,
    scope: Literal["all", "future"] = Query(default="all"),
    from_date: Optional[date] = Query(default=None),
    stores: Stores = Depends(get_stores),
) -> PurgeResponse:
    try:
        deleted = purge_plans_for_customer(stores.plans, customer_id, scope=scope, from_date=from_date)
    except StoreUnavailableError as exc:
        raise _store_error(exc) from exc
    logger.info(f"Purged {deleted} plan entries for customer {customer_id} (scope={scope})")
    return PurgeResponse(customer_id=customer_id, scope=scope, deleted=deleted)
