"""HTTP client for the calview backend, as used by the presentation layer."""
from __future__ import annotations
import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from ..domain.models import CalendarEvent, EventSet

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
FALLBACK_MESSAGE = "Failed to fetch calendar events. Please try again."


class BackendError(Exception):
    def __init__(self, code: str, message: str, status: Optional[int] = None):
        self.code = code
        self.message = message
        self.status = status
        super().__init__(message)


class CalendarBackendClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, http: Any = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def fetch_events(self, token: str, code: Optional[str] = None) -> EventSet:
        payload = {"token": token}
        if code:
            payload["code"] = code
        try:
            resp = self.http.post(f"{self.base_url}/api/calendar", json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendError("NETWORK_ERROR", str(e) or FALLBACK_MESSAGE)

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code >= 400:
            body = data if isinstance(data, dict) else {}
            raise BackendError(
                body.get("code") or "HTTP_ERROR",
                body.get("error") or FALLBACK_MESSAGE,
                status=resp.status_code,
            )
        if not isinstance(data, list):
            raise BackendError("NO_DATA", "No data received from server", status=resp.status_code)
        try:
            return tuple(CalendarEvent.model_validate(item) for item in data)
        except ValidationError as e:
            logger.warning("backend returned malformed events: %s", e)
            raise BackendError("BAD_RESPONSE", FALLBACK_MESSAGE, status=resp.status_code)
