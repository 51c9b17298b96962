"""Planning request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class ReconcileRequest(BaseModel):
    today: Optional[date] = Field(
        default=None,
        description="Business-local date the run treats as today. Defaults to the current date.",
    )


class ReconcileOutcomeModel(BaseModel):
    customer_id: str
    classification: Literal["NEW", "FORECASTED", "FALLBACK"]
    written: int
    deleted: int
    demoted: bool = False
    error: Optional[str] = None


class ReconcileReportModel(BaseModel):
    today: date
    base_year: int
    counts: Dict[str, int]
    outcomes: List[ReconcileOutcomeModel]


class PlanEntryModel(BaseModel):
    id: str
    customer_id: str
    date_iso: date


class PlanSummaryModel(BaseModel):
    year: int
    total_count: int
    monthly_counts: List[int]


class CustomerForecastModel(BaseModel):
    customer_id: str
    classification: Literal["NEW", "FORECASTED", "FALLBACK"]
    planned_dates: List[date]
    target_year_count: Optional[int] = None
    monthly_counts: Optional[List[int]] = None
    cycle_days: Optional[int] = None
    demoted: bool = False
    error: Optional[str] = None
    summary: Optional[PlanSummaryModel] = None


class PurgeResponse(BaseModel):
    customer_id: str
    scope: Literal["all", "future"]
    deleted: int
