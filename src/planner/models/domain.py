"""Domain models for customers, deliveries and plan entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class TankType(str, Enum):
    """Tank profile attached to a customer; each has a nominal refill cycle."""

    A = "A"
    B = "B"
    C = "C"

    @property
    def cycle_days(self) -> int:
        return TANK_CYCLE_DAYS[self]


TANK_CYCLE_DAYS: dict[TankType, int] = {
    TankType.A: 38,
    TankType.B: 42,
    TankType.C: 51,
}


@dataclass(slots=True)
class Customer:
    """Represents a delivery customer with optional geocoded coordinates."""

    customer_id: str
    name: str = ""
    address: Optional[str] = None
    tank_type: Optional[TankType] = None
    tank_capacity: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True, slots=True)
class DeliveryRecord:
    """A completed delivery. The date may be unparsed text from the order store."""

    customer_id: str
    date: date | str


def plan_entry_id(customer_id: str, day: date) -> str:
    return f"{day.isoformat()}#{customer_id}"


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """One planned delivery, unique per (customer_id, date)."""

    customer_id: str
    date: date

    @property
    def id(self) -> str:
        return plan_entry_id(self.customer_id, self.date)


@dataclass(frozen=True, slots=True)
class YearlyCount:
    year: int
    count: int


@dataclass(slots=True)
class ForecastResult:
    """Output of the forecast pipeline for one customer."""

    target_year_count: int
    monthly_counts: list[int]
    planned_dates: list[date] = field(default_factory=list)
