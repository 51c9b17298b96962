"""History-based delivery forecasting."""

from .fallback import cycle_days_for_tank, next_date_phase_aligned, year_phase_aligned
from .horizon import assemble_horizon, build_plan_from_history
from .summary import apply_plan_adjustment, summarize_planned_dates

__all__ = [
    "assemble_horizon",
    "build_plan_from_history",
    "cycle_days_for_tank",
    "next_date_phase_aligned",
    "year_phase_aligned",
    "summarize_planned_dates",
    "apply_plan_adjustment",
]
