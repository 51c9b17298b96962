"""Calendar helpers shared by the forecast and planning services."""

from __future__ import annotations

import calendar
import math
import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..config import settings
from ..errors import MalformedDateError

ISO_YMD = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_ymd(value: object) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a ``date`` through)."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_YMD.match(value):
        raise MalformedDateError(f"Not an ISO calendar date: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise MalformedDateError(f"Not a valid calendar date: {value!r}") from exc


def business_today(timezone: str | None = None) -> date:
    """Return today's date in the business timezone."""

    return datetime.now(ZoneInfo(timezone or settings.business_timezone)).date()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""

    return math.floor(value + 0.5)
