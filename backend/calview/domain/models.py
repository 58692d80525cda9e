"""Domain types shared by the backend and the client session."""
from __future__ import annotations
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import AccessTokenSource


class TimePoint(BaseModel):
    """Either an instant (timed event) or a calendar date (all-day event)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date_time: Optional[dt.datetime] = Field(None, alias="dateTime")
    day: Optional[dt.date] = Field(None, alias="date")
    time_zone: Optional[str] = Field(None, alias="timeZone")

    @model_validator(mode="after")
    def _exactly_one_form(self) -> "TimePoint":
        if (self.date_time is None) == (self.day is None):
            raise ValueError("exactly one of dateTime or date must be set")
        return self

    @property
    def is_all_day(self) -> bool:
        return self.day is not None

    @property
    def effective_date(self) -> dt.date:
        """Calendar date of the point, in the offset the calendar API returned."""
        if self.date_time is not None:
            return self.date_time.date()
        return self.day

    @property
    def instant(self) -> dt.datetime:
        # all-day dates compare as UTC midnight; naive instants are taken as UTC
        if self.date_time is not None:
            if self.date_time.tzinfo is None:
                return self.date_time.replace(tzinfo=dt.timezone.utc)
            return self.date_time
        return dt.datetime.combine(self.day, dt.time.min, tzinfo=dt.timezone.utc)


class CalendarEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    summary: str = ""
    start: TimePoint
    end: TimePoint

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _start_not_after_end(self) -> "CalendarEvent":
        if self.end.instant < self.start.instant:
            raise ValueError("event ends before it starts")
        return self

    @property
    def effective_date(self) -> dt.date:
        return self.start.effective_date

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Immutable, time-ordered result of one query
EventSet = Tuple[CalendarEvent, ...]


@dataclass(frozen=True)
class DateWindow:
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start_date is None and self.end_date is None

    @property
    def is_inverted(self) -> bool:
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        )

    def contains(self, day: dt.date) -> bool:
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return True


@dataclass(frozen=True)
class VerifiedIdentity:
    subject: str
    access_token: str
    access_token_source: AccessTokenSource
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, repr=False)
