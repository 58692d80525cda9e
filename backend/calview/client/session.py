"""Client-side session state.

The stored EventSet and the DateWindow are independent cells; the filtered
view is recomputed from both whenever either changes. Only the backend call
touches the network.
"""
from __future__ import annotations
import logging
import threading
from datetime import date
from typing import List, Optional

from ..domain.enums import SessionState
from ..domain.filtering import filter_events
from ..domain.models import DateWindow, EventSet
from .backend import BackendError, CalendarBackendClient
from .presentation import EventRow, build_rows

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Login Failed. Please try again."
NO_CREDENTIAL_MESSAGE = "No credential received"


class CalendarSession:
    def __init__(self, backend: CalendarBackendClient):
        self.backend = backend
        self._lock = threading.Lock()
        self._state = SessionState.LOGGED_OUT
        self._error: Optional[str] = None
        self._events: EventSet = ()
        self._window = DateWindow()
        self._filtered: EventSet = ()
        self._last_attempt = 0
        self._applied_attempt = 0

    # --- read side ---
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def events(self) -> EventSet:
        return self._events

    @property
    def window(self) -> DateWindow:
        return self._window

    @property
    def filtered_events(self) -> EventSet:
        return self._filtered

    def rows(self) -> List[EventRow]:
        return build_rows(self._filtered)

    # --- transitions ---
    def login(self, credential: Optional[str], code: Optional[str] = None) -> SessionState:
        """Send a freshly obtained credential to the backend and apply the outcome."""
        if not credential:
            self.login_failed(NO_CREDENTIAL_MESSAGE)
            return self._state
        attempt = self.begin_login()
        try:
            events = self.backend.fetch_events(credential, code=code)
        except BackendError as e:
            logger.warning("login attempt %d failed: %s (%s)", attempt, e.message, e.code)
            self.complete_login(attempt, error=e.message)
        else:
            self.complete_login(attempt, events=events)
        return self._state

    def begin_login(self) -> int:
        with self._lock:
            self._last_attempt += 1
            self._state = SessionState.AUTHENTICATING
            self._error = None
            return self._last_attempt

    def complete_login(self, attempt: int, events: Optional[EventSet] = None, error: Optional[str] = None) -> bool:
        """Apply an attempt's outcome unless a later outcome has already been applied."""
        with self._lock:
            if attempt <= self._applied_attempt:
                logger.debug("discarding stale outcome of attempt %d", attempt)
                return False
            self._applied_attempt = attempt
            self._window = DateWindow()
            if error is None:
                self._state = SessionState.LOGGED_IN
                self._error = None
                self._events = tuple(events or ())
            else:
                self._state = SessionState.LOGGED_OUT
                self._error = error
                self._events = ()
            self._recompute()
            return True

    def login_failed(self, message: str = LOGIN_FAILED_MESSAGE) -> None:
        """Identity provider reported a failure before any credential was issued."""
        with self._lock:
            # outcomes of attempts started before this failure are stale
            self._applied_attempt = self._last_attempt
            self._state = SessionState.LOGGED_OUT
            self._error = message
            self._events = ()
            self._window = DateWindow()
            self._recompute()

    def set_window(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> EventSet:
        """Replace the date window and re-filter the stored events."""
        with self._lock:
            self._window = DateWindow(start_date=start_date, end_date=end_date)
            self._recompute()
            return self._filtered

    def _recompute(self) -> None:
        self._filtered = filter_events(self._events, self._window)
