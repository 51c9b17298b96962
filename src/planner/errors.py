"""Exception types raised by the planner."""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for planner errors."""


class MalformedDateError(PlannerError, ValueError):
    """A stored date could not be parsed as an ISO calendar day."""


class MissingHistoryError(PlannerError, ValueError):
    """The customer has no usable delivery history."""


class InsufficientBaseYearError(PlannerError, ValueError):
    """The customer has history, but none in the base year."""


class ForecastComputationError(PlannerError):
    """Unexpected failure while computing a forecast for one customer."""


class StoreUnavailableError(PlannerError):
    """A backing store could not be reached or returned an error."""


class ReconcileInProgressError(PlannerError):
    """Another reconciliation pass is already running."""
