"""Store ports and their implementations."""

from .memory import InMemoryCustomerStore, InMemoryOrderStore, InMemoryPlanStore
from .stores import CustomerStore, OrderStore, PlanStore

__all__ = [
    "CustomerStore",
    "OrderStore",
    "PlanStore",
    "InMemoryCustomerStore",
    "InMemoryOrderStore",
    "InMemoryPlanStore",
]
