"""Store wiring for the API routes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends

from ..db.supabase import get_supabase_client
from ..persistence.memory import InMemoryCustomerStore, InMemoryOrderStore, InMemoryPlanStore
from ..persistence.stores import CustomerStore, OrderStore, PlanStore
from ..services.planning.predict_client import get_predict_client
from ..services.planning.reconciler import PlanReconciler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Stores:
    orders: OrderStore
    customers: CustomerStore
    plans: PlanStore


@lru_cache(maxsize=1)
def get_stores() -> Stores:
    """Supabase-backed stores when configured, otherwise process-local memory."""

    client = get_supabase_client()
    if client is None:
        logger.warning("Supabase not configured - using in-memory stores")
        return Stores(InMemoryOrderStore(), InMemoryCustomerStore(), InMemoryPlanStore())

    from ..persistence.supabase_store import SupabaseCustomerStore, SupabaseOrderStore, SupabasePlanStore

    return Stores(SupabaseOrderStore(client), SupabaseCustomerStore(client), SupabasePlanStore(client))


def get_reconciler(stores: Stores = Depends(get_stores)) -> PlanReconciler:
    return PlanReconciler(stores.orders, stores.customers, stores.plans, predictor=get_predict_client())
