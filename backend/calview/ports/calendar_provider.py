from __future__ import annotations
from typing import Protocol, Dict, Any, Callable


class CalendarProvider(Protocol):
    """Abstracts the remote calendar list call for testability."""

    def list_events(
        self,
        calendar_id: str,
        time_min_iso: str,
        max_results: int,
    ) -> Dict[str, Any]:
        """Return one page of single-occurrence events ordered by start time.
        Result shape: { 'items': [...] }
        """
        ...


# Builds a provider bound to one access token
CalendarProviderFactory = Callable[[str], CalendarProvider]
