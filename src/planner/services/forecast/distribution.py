"""Seasonal month-by-month allocation of a yearly target."""

from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Sequence

from ...config import settings
from ..dates import round_half_up

logger = logging.getLogger(__name__)

MONTHS = 12
MAX_REDISTRIBUTION_STEPS = MONTHS * 3


def monthly_weights(
    by_year: Mapping[int, Sequence[date]],
    base_year: int,
    *,
    w_last: float | None = None,
    w_past: float | None = None,
) -> list[float]:
    """Return 12 month shares summing to 1, weighting the base year more heavily."""

    w_last = settings.w_last if w_last is None else w_last
    w_past = settings.w_past if w_past is None else w_past

    last = [0] * MONTHS
    past = [0] * MONTHS
    for year, dates in by_year.items():
        bucket = last if year == base_year else past
        for day in dates:
            bucket[day.month - 1] += 1

    weights = [w_last * last[m] + w_past * past[m] for m in range(MONTHS)]
    total = sum(weights)
    if total <= 0:
        return [1 / MONTHS] * MONTHS
    return [w / total for w in weights]


def monthly_targets(target_year_count: int, shares: Sequence[float]) -> list[int]:
    """Split ``target_year_count`` across months so the counts add up to it.

    Each month gets its rounded share; the rounding remainder is then pushed
    one unit at a time through the months in calendar order. Decrements skip
    months already at zero. The fix-up stops after 36 steps, so pathological
    inputs (large negative remainders over mostly empty months) may not fully
    converge.
    """

    if target_year_count <= 0:
        return [0] * MONTHS
    if len(shares) != MONTHS:
        raise ValueError(f"Expected {MONTHS} monthly shares, got {len(shares)}.")

    monthly = [round_half_up(share * target_year_count) for share in shares]
    remainder = target_year_count - sum(monthly)

    step = 0
    while remainder != 0 and step < MAX_REDISTRIBUTION_STEPS:
        month = step % MONTHS
        if remainder > 0:
            monthly[month] += 1
            remainder -= 1
        elif monthly[month] > 0:
            monthly[month] -= 1
            remainder += 1
        step += 1

    if remainder != 0:
        logger.warning(
            "Monthly allocation stopped after %d steps with remainder %d (target %d)",
            MAX_REDISTRIBUTION_STEPS,
            remainder,
            target_year_count,
        )
    return monthly
