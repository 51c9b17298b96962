"""Supabase-backed implementations of the planner stores.

Tables:
    customers(id, name, address, tank_type, tank_capacity, lat, lng)
    orders(id, customer_id, date)
    plans(id, date_iso, customer_id)  -- id is "<date_iso>#<customer_id>"
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Optional, TypeVar

from supabase import Client

from ..errors import MalformedDateError, StoreUnavailableError
from ..models.domain import Customer, DeliveryRecord, PlanEntry, TankType, plan_entry_id
from ..services.dates import parse_ymd

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgREST caps the length of `in` filters carried in the query string.
DELETE_BATCH_SIZE = 100


def _execute(description: str, operation: Callable[[], T]) -> T:
    try:
        return operation()
    except Exception as exc:
        logger.error(f"Supabase {description} failed: {exc}")
        raise StoreUnavailableError(f"Supabase {description} failed: {exc}") from exc


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _tank_type(value: Any) -> Optional[TankType]:
    try:
        return TankType(value) if value else None
    except ValueError:
        logger.debug(f"Unknown tank type {value!r}; using the fallback cycle")
        return None


def _customer_from_row(row: dict) -> Customer:
    return Customer(
        customer_id=str(row["id"]),
        name=row.get("name") or "",
        address=row.get("address"),
        tank_type=_tank_type(row.get("tank_type")),
        tank_capacity=_optional_float(row.get("tank_capacity")),
        latitude=_optional_float(row.get("lat")),
        longitude=_optional_float(row.get("lng")),
    )


def _plans_from_rows(rows: Iterable[dict]) -> list[PlanEntry]:
    entries = []
    for row in rows:
        try:
            entries.append(PlanEntry(customer_id=str(row["customer_id"]), date=parse_ymd(row["date_iso"])))
        except (KeyError, MalformedDateError):
            logger.debug(f"Skipping malformed plan row: {row!r}")
    return entries


class SupabaseOrderStore:
    def __init__(self, client: Client) -> None:
        self.client = client

    def list_by_customer(self, customer_id: str) -> list[DeliveryRecord]:
        response = _execute(
            "order query",
            lambda: self.client.table("orders").select("customer_id,date").eq("customer_id", customer_id).execute(),
        )
        # Dates are left as stored; malformed values are dropped during extraction.
        return [
            DeliveryRecord(customer_id=str(row["customer_id"]), date=row.get("date"))
            for row in (response.data or [])
        ]


class SupabaseCustomerStore:
    def __init__(self, client: Client) -> None:
        self.client = client

    def list(self) -> list[Customer]:
        response = _execute("customer list", lambda: self.client.table("customers").select("*").execute())
        return [_customer_from_row(row) for row in (response.data or []) if row.get("id") is not None]

    def get(self, customer_id: str) -> Optional[Customer]:
        response = _execute(
            "customer lookup",
            lambda: self.client.table("customers").select("*").eq("id", customer_id).limit(1).execute(),
        )
        rows = response.data or []
        return _customer_from_row(rows[0]) if rows else None


class SupabasePlanStore:
    def __init__(self, client: Client) -> None:
        self.client = client

    def query_by_customer(self, customer_id: str) -> list[PlanEntry]:
        response = _execute(
            "plan query",
            lambda: self.client.table("plans")
            .select("id,date_iso,customer_id")
            .eq("customer_id", customer_id)
            .order("date_iso")
            .execute(),
        )
        return _plans_from_rows(response.data or [])

    def query_between(self, start: date, end: date) -> list[PlanEntry]:
        response = _execute(
            "plan window query",
            lambda: self.client.table("plans")
            .select("id,date_iso,customer_id")
            .gte("date_iso", start.isoformat())
            .lte("date_iso", end.isoformat())
            .order("date_iso")
            .execute(),
        )
        return _plans_from_rows(response.data or [])

    def upsert(self, customer_id: str, day: date) -> PlanEntry:
        row = {"id": plan_entry_id(customer_id, day), "date_iso": day.isoformat(), "customer_id": customer_id}
        _execute("plan upsert", lambda: self.client.table("plans").upsert(row, on_conflict="id").execute())
        return PlanEntry(customer_id=customer_id, date=day)

    def bulk_delete(self, ids: Iterable[str]) -> int:
        id_list = list(ids)
        deleted = 0
        for offset in range(0, len(id_list), DELETE_BATCH_SIZE):
            batch = id_list[offset : offset + DELETE_BATCH_SIZE]
            response = _execute(
                "plan delete",
                lambda: self.client.table("plans").delete().in_("id", batch).execute(),
            )
            deleted += len(response.data or [])
        return deleted
