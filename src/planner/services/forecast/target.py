"""Yearly delivery target estimation."""

from __future__ import annotations

import math
from typing import Sequence

from ...config import settings
from ...models.domain import YearlyCount
from ..dates import round_half_up


def decide_target_year_count(
    counts: Sequence[YearlyCount],
    base_year: int,
    *,
    clamp_low: float | None = None,
    clamp_high: float | None = None,
) -> int:
    """Derive next year's delivery count from the yearly history.

    The historical mean is used, but when the base year has deliveries the
    result is kept within ``[floor(last * low), ceil(last * high)]`` of the
    base-year count so one unusual year cannot shrink or inflate the plan
    too far.
    """

    if not counts:
        return 0

    low = settings.target_clamp_low if clamp_low is None else clamp_low
    high = settings.target_clamp_high if clamp_high is None else clamp_high

    last_year_count = next((c.count for c in counts if c.year == base_year), 0)
    average = sum(c.count for c in counts) / len(counts)
    target = round_half_up(average)

    if last_year_count <= 0:
        return target

    min_allowed = math.floor(last_year_count * low)
    max_allowed = math.ceil(last_year_count * high)
    target = max(min_allowed, min(target, max_allowed))
    if target <= 0:
        target = last_year_count
    return target
