"""HTTP client for a remote predict-next endpoint.

The remote answer is advisory: every failure yields ``None`` and callers use
the local phase-aligned computation instead.
"""

from __future__ import annotations

import logging
import time
from datetime import date
from typing import Optional

import httpx

from ...config import settings
from ...errors import MalformedDateError
from ..dates import parse_ymd

logger = logging.getLogger(__name__)


class PredictNextClient:
    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url or settings.predict_next_url
        if not self.url:
            raise ValueError("Predict-next URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.predict_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.predict_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.predict_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)), transport=self._transport)

    def _post(self, payload: dict) -> dict:
        with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = client.post(self.url, json=payload)
                    response.raise_for_status()
                    return response.json()
                except (httpx.TimeoutException, httpx.TransportError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Predict-next request failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)

    def predict_next(self, last_date: date, cycle_days: int) -> Optional[date]:
        """Ask the remote endpoint for the date ``cycle_days`` after ``last_date``."""

        payload = {"lastDate": last_date.isoformat(), "cycleDays": cycle_days}
        try:
            body = self._post(payload)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning(f"Predict-next call failed, using local computation: {e}")
            return None
        except Exception as e:
            logger.warning(f"Unexpected predict-next error, using local computation: {e}")
            return None

        if not isinstance(body, dict) or body.get("ok") is not True:
            logger.warning(f"Predict-next returned an unusable body: {body!r}")
            return None
        try:
            return parse_ymd(body.get("next"))
        except MalformedDateError:
            logger.warning(f"Predict-next returned a malformed date: {body.get('next')!r}")
            return None


def get_predict_client() -> Optional[PredictNextClient]:
    """Return a client when a remote endpoint is configured, else ``None``."""

    if not settings.predict_next_url:
        return None
    return PredictNextClient()
