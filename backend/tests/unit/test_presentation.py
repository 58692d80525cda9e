from calview.client.presentation import build_rows, format_time_point
from calview.domain.models import CalendarEvent, TimePoint


def test_format_timed_points():
    assert format_time_point(TimePoint.model_validate({"dateTime": "2025-08-13T10:00:00Z"})) == "Aug 13, 2025, 10:00 AM"
    assert format_time_point(TimePoint.model_validate({"dateTime": "2025-08-03T00:30:00Z"})) == "Aug 3, 2025, 12:30 AM"
    assert format_time_point(TimePoint.model_validate({"dateTime": "2025-12-24T15:05:00-08:00"})) == "Dec 24, 2025, 3:05 PM"


def test_format_all_day_point_has_no_time():
    assert format_time_point(TimePoint.model_validate({"date": "2025-08-20"})) == "Aug 20, 2025"


def test_rows_are_keyed_by_event_id(three_items):
    events = [CalendarEvent.model_validate(i) for i in three_items]
    rows = build_rows(events)
    assert [r.key for r in rows] == ["evt-1", "evt-2", "evt-3"]
    assert rows[1].summary == "Design review"
    assert rows[1].start == "Aug 15, 2025, 9:00 AM"
    assert rows[2].end == "Aug 21, 2025"
