"""Plan reconciliation against the plan store."""

from .reconciler import (
    Classification,
    CustomerForecast,
    PlanReconciler,
    ReconcileOutcome,
    ReconcileReport,
    purge_plans_for_customer,
)

__all__ = [
    "Classification",
    "CustomerForecast",
    "PlanReconciler",
    "ReconcileOutcome",
    "ReconcileReport",
    "purge_plans_for_customer",
]
