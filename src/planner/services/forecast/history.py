"""Delivery history extraction and per-year aggregation."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from ...errors import MalformedDateError
from ...models.domain import YearlyCount
from ..dates import parse_ymd

logger = logging.getLogger(__name__)


def clean_dates(values: Iterable[object]) -> list[date]:
    """Parse every value, silently dropping the ones that are not calendar dates."""

    parsed: list[date] = []
    for value in values:
        try:
            parsed.append(parse_ymd(value))
        except MalformedDateError:
            logger.debug("Skipping malformed delivery date %r", value)
    return parsed


def extract_history(values: Iterable[object], base_year: int, years_back: int) -> list[date]:
    """Return valid dates with year in ``[base_year - years_back, base_year]``, ascending."""

    min_year = base_year - years_back
    return sorted(d for d in clean_dates(values) if min_year <= d.year <= base_year)


def split_by_year(history: Iterable[date]) -> dict[int, list[date]]:
    by_year: dict[int, list[date]] = {}
    for day in history:
        by_year.setdefault(day.year, []).append(day)
    for dates in by_year.values():
        dates.sort()
    return by_year


def yearly_counts(by_year: dict[int, list[date]]) -> list[YearlyCount]:
    return [YearlyCount(year=year, count=len(dates)) for year, dates in sorted(by_year.items())]
