"""Horizon assembly and the end-to-end history-to-plan pipeline."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Sequence

from ...config import settings
from ...errors import InsufficientBaseYearError, MissingHistoryError
from ...models.domain import ForecastResult
from .distribution import monthly_targets, monthly_weights
from .history import extract_history, split_by_year, yearly_counts
from .spacing import dates_for_month
from .target import decide_target_year_count


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def assemble_horizon(
    monthly_counts: Sequence[int],
    start: date,
    horizon_days: int | None = None,
) -> list[date]:
    """Lay the monthly pattern over ``[start, start + horizon_days]``."""

    horizon_days = settings.horizon_days if horizon_days is None else horizon_days
    end = start + timedelta(days=horizon_days)

    collected: list[date] = []
    year, month = start.year, start.month
    while date(year, month, 1) <= end:
        collected.extend(dates_for_month(year, month, monthly_counts[month - 1]))
        year, month = _next_month(year, month)

    return sorted({day for day in collected if start <= day <= end})


def build_plan_from_history(
    history: Iterable[object],
    base_year: int,
    start: date | None = None,
    horizon_days: int | None = None,
    *,
    years_back: int | None = None,
    w_last: float | None = None,
    w_past: float | None = None,
) -> ForecastResult:
    """Forecast a customer's deliveries from ``start`` over the horizon.

    ``history`` holds past delivery dates (``date`` objects or ISO strings).
    ``start`` defaults to 1 January of the year after ``base_year``.

    Raises:
        MissingHistoryError: no valid dates fall inside the lookback window.
        InsufficientBaseYearError: none of them are in ``base_year``.
    """

    years_back = settings.max_years_back if years_back is None else years_back

    dates = extract_history(history, base_year, years_back)
    if not dates:
        raise MissingHistoryError("No valid delivery history inside the lookback window.")

    by_year = split_by_year(dates)
    counts = yearly_counts(by_year)
    if not by_year.get(base_year):
        raise InsufficientBaseYearError(f"No deliveries recorded in base year {base_year}.")

    target = decide_target_year_count(counts, base_year)
    shares = monthly_weights(by_year, base_year, w_last=w_last, w_past=w_past)
    monthly = monthly_targets(target, shares)

    start = start or date(base_year + 1, 1, 1)
    planned = assemble_horizon(monthly, start, horizon_days)

    return ForecastResult(target_year_count=target, monthly_counts=monthly, planned_dates=planned)
