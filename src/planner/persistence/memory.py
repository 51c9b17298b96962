"""In-process store implementations used for tests and local runs."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..models.domain import Customer, DeliveryRecord, PlanEntry, plan_entry_id


class InMemoryOrderStore:
    def __init__(self, records: Iterable[DeliveryRecord] = ()) -> None:
        self._records: list[DeliveryRecord] = list(records)

    def add(self, customer_id: str, day: date | str) -> DeliveryRecord:
        record = DeliveryRecord(customer_id=customer_id, date=day)
        self._records.append(record)
        return record

    def list_by_customer(self, customer_id: str) -> list[DeliveryRecord]:
        return [record for record in self._records if record.customer_id == customer_id]


class InMemoryCustomerStore:
    def __init__(self, customers: Iterable[Customer] = ()) -> None:
        self._customers: dict[str, Customer] = {c.customer_id: c for c in customers}

    def add(self, customer: Customer) -> None:
        self._customers[customer.customer_id] = customer

    def list(self) -> list[Customer]:
        return list(self._customers.values())

    def get(self, customer_id: str) -> Optional[Customer]:
        return self._customers.get(customer_id)


class InMemoryPlanStore:
    def __init__(self, entries: Iterable[PlanEntry] = ()) -> None:
        self._entries: dict[str, PlanEntry] = {entry.id: entry for entry in entries}

    def all(self) -> list[PlanEntry]:
        return sorted(self._entries.values(), key=lambda e: (e.date, e.customer_id))

    def query_by_customer(self, customer_id: str) -> list[PlanEntry]:
        return sorted(
            (entry for entry in self._entries.values() if entry.customer_id == customer_id),
            key=lambda e: e.date,
        )

    def query_between(self, start: date, end: date) -> list[PlanEntry]:
        return [entry for entry in self.all() if start <= entry.date <= end]

    def upsert(self, customer_id: str, day: date) -> PlanEntry:
        entry = PlanEntry(customer_id=customer_id, date=day)
        self._entries[plan_entry_id(customer_id, day)] = entry
        return entry

    def bulk_delete(self, ids: Iterable[str]) -> int:
        removed = 0
        for entry_id in ids:
            if self._entries.pop(entry_id, None) is not None:
                removed += 1
        return removed
