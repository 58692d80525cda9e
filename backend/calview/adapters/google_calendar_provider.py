from __future__ import annotations
from typing import Dict, Any
from googleapiclient.discovery import build
from google.oauth2.credentials import Credentials

from ..ports.calendar_provider import CalendarProvider


class GoogleCalendarProvider(CalendarProvider):
    def __init__(self, credentials: Credentials):
        self._service = build('calendar', 'v3', credentials=credentials, cache_discovery=False)

    @classmethod
    def from_access_token(cls, access_token: str) -> "GoogleCalendarProvider":
        return cls(Credentials(token=access_token))

    def list_events(
        self,
        calendar_id: str,
        time_min_iso: str,
        max_results: int,
    ) -> Dict[str, Any]:
        req = self._service.events().list(
            calendarId=calendar_id,
            timeMin=time_min_iso,
            maxResults=max_results,
            singleEvents=True,
            orderBy='startTime',
        )
        return req.execute()
