"""API route modules."""

from . import health, plans, predict, routes

__all__ = ["health", "plans", "predict", "routes"]
