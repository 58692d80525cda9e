from __future__ import annotations
from typing import Iterable, Tuple

from .models import CalendarEvent, DateWindow


def filter_events(events: Iterable[CalendarEvent], window: DateWindow) -> Tuple[CalendarEvent, ...]:
    """Return the events whose effective start date falls inside ``window``.

    Both bounds are inclusive and either may be absent. The input order is
    preserved and the input is never modified. An inverted window
    (start after end) matches nothing.
    """
    if window.is_unbounded:
        return tuple(events)
    if window.is_inverted:
        return ()
    return tuple(e for e in events if window.contains(e.effective_date))
