"""Upcoming-events query against the user's primary calendar.

Query parameters are fixed: primary calendar, from ``now`` with no upper
bound, recurring events expanded, ordered by start time, capped at
``max_results``.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import httplib2
from google.auth import exceptions as google_exceptions
from googleapiclient.errors import HttpError
from pydantic import ValidationError

from ..adapters.google_calendar_provider import GoogleCalendarProvider
from ..domain.models import CalendarEvent, EventSet
from ..errors import UnauthorizedError, UpstreamUnavailableError
from ..ports.calendar_provider import CalendarProviderFactory

logger = logging.getLogger(__name__)

PRIMARY_CALENDAR = "primary"
DEFAULT_MAX_RESULTS = 10
_REJECTED_STATUSES = {401, 403}


class CalendarQueryService:
    def __init__(self, provider_factory: Optional[CalendarProviderFactory] = None):
        self.provider_factory = provider_factory or GoogleCalendarProvider.from_access_token

    def list_upcoming_events(
        self,
        access_token: str,
        now: Optional[datetime] = None,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> EventSet:
        if max_results <= 0:
            raise ValueError(f"max_results must be positive, got {max_results}")
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        try:
            provider = self.provider_factory(access_token)
            result = provider.list_events(PRIMARY_CALENDAR, now.isoformat(), max_results)
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.warning("calendar API error (status=%s): %s", status, e)
            if status in _REJECTED_STATUSES:
                raise UnauthorizedError(details=f"Google API error: {e}")
            raise UpstreamUnavailableError(details=f"Google API error: {e}")
        except google_exceptions.RefreshError as e:
            # raised when the API answers 401 and the token cannot be refreshed
            logger.warning("calendar API rejected access token: %s", e)
            raise UnauthorizedError(details=str(e))
        except (google_exceptions.TransportError, httplib2.HttpLib2Error, OSError) as e:
            logger.warning("calendar API unreachable: %s", e)
            raise UpstreamUnavailableError(details=str(e))

        events = normalize_events((result or {}).get("items") or [], max_results)
        logger.info("fetched %d upcoming events", len(events))
        return events


def normalize_events(items: Iterable[Dict[str, Any]], max_results: int) -> EventSet:
    """Parse raw API items into ordered, de-duplicated events.

    Items that do not form a valid event (no id, both or neither time forms,
    end before start) are dropped.
    """
    seen = set()
    parsed: List[CalendarEvent] = []
    for item in items:
        try:
            event = CalendarEvent.model_validate(item)
        except ValidationError as e:
            item_id = item.get("id") if isinstance(item, dict) else None
            logger.warning("skipping malformed event %r: %s", item_id, e.errors()[0]["msg"])
            continue
        if event.id in seen:
            continue
        seen.add(event.id)
        parsed.append(event)
    # stable: keeps the API order within a day
    parsed.sort(key=lambda ev: ev.effective_date)
    return tuple(parsed[:max_results])
