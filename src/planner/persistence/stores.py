"""Storage ports consumed by the planner services."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from ..models.domain import Customer, DeliveryRecord, PlanEntry


class OrderStore(Protocol):
    def list_by_customer(self, customer_id: str) -> list[DeliveryRecord]: ...


class CustomerStore(Protocol):
    def list(self) -> list[Customer]: ...

    def get(self, customer_id: str) -> Optional[Customer]: ...


class PlanStore(Protocol):
    """Planned deliveries keyed uniquely by ``(customer_id, date)``."""

    def query_by_customer(self, customer_id: str) -> list[PlanEntry]: ...

    def query_between(self, start: date, end: date) -> list[PlanEntry]: ...

    def upsert(self, customer_id: str, day: date) -> PlanEntry: ...

    def bulk_delete(self, ids: Iterable[str]) -> int: ...
