"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check that the plan store's database is configured and reachable."""
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set PLANNER_SUPABASE_URL and PLANNER_SUPABASE_KEY environment variables.",
        }

    try:
        supabase.table("plans").select("id", count="exact").limit(1).execute()
        return {"configured": True, "connected": True}
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }


@router.get("/health/predict", status_code=status.HTTP_200_OK)
def check_predict() -> dict:
    """Report whether a remote predict-next endpoint is configured."""
    return {"configured": bool(settings.predict_next_url), "url": settings.predict_next_url}
