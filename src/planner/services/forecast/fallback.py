"""Fixed-cycle, phase-preserving projection for customers with sparse history.

The schedule is anchored on the customer's latest delivery and walked forward
in whole cycles, so a customer who has always been served around the same
point of the cycle keeps that rhythm instead of restarting from today.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from ...config import settings
from ...models.domain import TankType
from .history import clean_dates


def cycle_days_for_tank(tank_type: TankType | str | None, fallback: int | None = None) -> int:
    """Return the nominal refill cycle for a tank type (A=38, B=42, C=51)."""

    if tank_type is not None:
        try:
            return TankType(tank_type).cycle_days
        except ValueError:
            pass
    return settings.fallback_cycle_days if fallback is None else fallback


def _anchor(last_date: object | None, history: Iterable[object] | None) -> Optional[date]:
    if history is not None:
        dates = clean_dates(history)
        if dates:
            return max(dates)
    if last_date is not None:
        dates = clean_dates([last_date])
        if dates:
            return dates[0]
    return None


def step_past(anchor: date, cycle_days: int, today: date) -> date:
    """Add whole cycles to ``anchor`` until the result is after ``today``."""

    if cycle_days <= 0:
        raise ValueError(f"cycle_days must be positive, got {cycle_days}.")
    step = timedelta(days=cycle_days)
    candidate = anchor + step
    while candidate <= today:
        candidate += step
    return candidate


def next_date_phase_aligned(
    today: date,
    cycle_days: int,
    *,
    last_date: object | None = None,
    history: Iterable[object] | None = None,
) -> date:
    """First delivery after ``today`` keeping the phase of the latest delivery.

    The anchor is the latest valid ``history`` date, else ``last_date``. With
    no anchor at all the result is simply ``today + cycle_days``.
    """

    if cycle_days <= 0:
        raise ValueError(f"cycle_days must be positive, got {cycle_days}.")
    anchor = _anchor(last_date, history)
    if anchor is None:
        return today + timedelta(days=cycle_days)
    return step_past(anchor, cycle_days, today)


def year_phase_aligned(
    today: date,
    cycle_days: int,
    *,
    last_date: object | None = None,
    history: Iterable[object] | None = None,
    horizon_days: int | None = None,
    first: date | None = None,
) -> list[date]:
    """All phase-aligned delivery dates from the next one up to ``today + horizon``.

    ``first`` overrides the first date (e.g. an answer from a remote
    predictor); the remaining dates follow it in whole cycles.
    """

    horizon_days = settings.horizon_days if horizon_days is None else horizon_days
    if first is None:
        first = next_date_phase_aligned(today, cycle_days, last_date=last_date, history=history)
    elif cycle_days <= 0:
        raise ValueError(f"cycle_days must be positive, got {cycle_days}.")

    end = today + timedelta(days=horizon_days)
    step = timedelta(days=cycle_days)
    dates: list[date] = []
    current = first
    while current <= end:
        dates.append(current)
        current += step
    return dates
