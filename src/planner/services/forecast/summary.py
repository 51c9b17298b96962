"""Summaries of, and manual adjustments to, a list of planned dates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from .history import clean_dates


@dataclass(slots=True)
class PlanSummary:
    year: int
    total_count: int
    monthly_counts: list[int]


def summarize_planned_dates(planned_dates: Iterable[object]) -> Optional[PlanSummary]:
    """Count planned deliveries per month for the earliest year in the list.

    Dates from later years are ignored. Returns ``None`` when there is
    nothing valid to summarise.
    """

    dates = clean_dates(planned_dates)
    if not dates:
        return None

    year = min(d.year for d in dates)
    monthly = [0] * 12
    for day in dates:
        if day.year == year:
            monthly[day.month - 1] += 1
    return PlanSummary(year=year, total_count=sum(monthly), monthly_counts=monthly)


def apply_plan_adjustment(
    planned_dates: Iterable[object],
    *,
    add_dates: Sequence[object] = (),
    remove_dates: Sequence[object] = (),
) -> list[date]:
    """Drop ``remove_dates``, add ``add_dates`` and return a sorted unique list."""

    removed = set(clean_dates(remove_dates))
    kept = {day for day in clean_dates(planned_dates) if day not in removed}
    kept.update(clean_dates(add_dates))
    return sorted(kept)
