"""Next-delivery prediction endpoint.

Accepts ``{"lastDate": "YYYY-MM-DD", "cycleDays": int}`` and answers
``{"ok": true, "next": "YYYY-MM-DD"}``. Every response is JSON, errors
included, so clients can always decode the body.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ...errors import MalformedDateError
from ...services.dates import parse_ymd

logger = logging.getLogger(__name__)

router = APIRouter(tags=["predict"])

NO_STORE = {"cache-control": "no-store"}


def _reply(body: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(body, status_code=status_code, headers=NO_STORE)


@router.post("/predict-next")
async def predict_next(request: Request) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    cycle_days = body.get("cycleDays")
    if isinstance(cycle_days, bool) or not isinstance(cycle_days, int):
        return _reply({"ok": False, "message": "bad request"}, status.HTTP_400_BAD_REQUEST)
    try:
        last_date = parse_ymd(body.get("lastDate"))
    except MalformedDateError:
        return _reply({"ok": False, "message": "bad request"}, status.HTTP_400_BAD_REQUEST)

    try:
        next_date = last_date + timedelta(days=cycle_days)
    except OverflowError:
        logger.warning(f"predict-next overflow for {last_date} + {cycle_days}")
        return _reply({"ok": False, "message": "bad request"}, status.HTTP_400_BAD_REQUEST)
    return _reply({"ok": True, "next": next_date.isoformat()})
