"""Even spacing of a month's deliveries across its days."""

from __future__ import annotations

from datetime import date

from ..dates import days_in_month, round_half_up


def dates_for_month(year: int, month: int, count: int) -> list[date]:
    """Place ``count`` deliveries at the centres of equal slices of the month.

    Exactly ``count`` dates are returned. Clamping at the month boundaries can
    produce repeated days; those are left in place.
    """

    if count <= 0:
        return []

    last_day = days_in_month(year, month)
    step = last_day / count
    dates: list[date] = []
    for i in range(count):
        day = round_half_up(i * step + step / 2)
        dates.append(date(year, month, min(max(day, 1), last_day)))
    return dates
