from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List

from ..domain.models import CalendarEvent, TimePoint

EMPTY_RANGE_MESSAGE = "No events found for the selected date range."


@dataclass(frozen=True)
class EventRow:
    key: str
    summary: str
    start: str
    end: str


def format_time_point(point: TimePoint) -> str:
    """``Aug 13, 2025, 10:00 AM`` for instants, ``Aug 13, 2025`` for all-day dates."""
    if point.is_all_day:
        d = point.day
        return f"{d:%b} {d.day}, {d.year}"
    t = point.date_time
    hour = t.hour % 12 or 12
    meridiem = "AM" if t.hour < 12 else "PM"
    return f"{t:%b} {t.day}, {t.year}, {hour}:{t:%M} {meridiem}"


def build_rows(events: Iterable[CalendarEvent]) -> List[EventRow]:
    return [
        EventRow(
            key=e.id,
            summary=e.summary,
            start=format_time_point(e.start),
            end=format_time_point(e.end),
        )
        for e in events
    ]
