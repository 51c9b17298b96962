"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PLANNER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Planner API"
    api_prefix: str = "/api"
    business_timezone: str = Field(
        default="Asia/Tokyo",
        description="Timezone that defines the business-local calendar day.",
    )

    # Forecast
    horizon_days: int = Field(default=370, ge=1, description="Days ahead to plan from today.")
    max_years_back: int = Field(default=3, ge=0, description="Years of history before the base year.")
    fallback_cycle_days: int = Field(default=42, ge=1, description="Cycle used when the tank type is unknown.")
    w_last: float = Field(default=0.7, ge=0.0, description="Seasonality weight of the base year.")
    w_past: float = Field(default=0.3, ge=0.0, description="Seasonality weight of all older years combined.")
    target_clamp_low: float = Field(default=0.85, ge=0.0)
    target_clamp_high: float = Field(default=1.3, ge=0.0)

    # Remote next-date endpoint (advisory only)
    predict_next_url: Optional[str] = Field(
        default=None,
        description="Full URL of a predict-next endpoint (e.g., https://host/api/predict-next).",
    )
    predict_timeout_seconds: float = Field(default=5.0, gt=0.0)
    predict_max_retries: int = Field(default=1, ge=0)
    predict_backoff_seconds: float = Field(default=0.5, ge=0.0)

    # Routing
    route_window_days: int = Field(default=3, ge=0, description="Days either side of the route day.")
    depot_latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    depot_longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @property
    def depot(self) -> Optional[tuple[float, float]]:
        if self.depot_latitude is None or self.depot_longitude is None:
            return None
        return (self.depot_latitude, self.depot_longitude)


settings = Settings()
