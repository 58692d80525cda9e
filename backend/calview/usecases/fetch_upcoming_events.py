from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from prometheus_client import Counter

from ..config import AppConfig
from ..domain.enums import AccessTokenSource
from ..domain.models import EventSet, VerifiedIdentity
from ..errors import BaseAppException, MissingInputError, UnexpectedError
from ..services.calendar_query import CalendarQueryService
from ..services.token_verifier import CodeExchanger, TokenVerifier

logger = logging.getLogger(__name__)

CALENDAR_FETCH_COUNT = Counter(
    "calview_calendar_fetch_total", "Calendar fetch attempts by outcome", ["outcome"]
)


@dataclass
class FetchUpcomingEventsResult:
    identity: VerifiedIdentity
    events: EventSet


class FetchUpcomingEventsUseCase:
    """Verify the caller's identity credential, then query their upcoming events.

    One synchronous sequence per request; nothing is kept between calls.
    """

    def __init__(
        self,
        config: AppConfig,
        verifier: TokenVerifier | None = None,
        query: CalendarQueryService | None = None,
        exchanger: CodeExchanger | None = None,
    ):
        self.config = config
        self.verifier = verifier or TokenVerifier()
        self.query = query or CalendarQueryService()
        self.exchanger = exchanger or CodeExchanger(config)

    def execute(
        self,
        token: Optional[str],
        code: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FetchUpcomingEventsResult:
        try:
            result = self._run(token, code, now)
        except BaseAppException as e:
            CALENDAR_FETCH_COUNT.labels(outcome=e.code).inc()
            raise
        except Exception as e:
            logger.exception("unexpected failure while fetching calendar events")
            CALENDAR_FETCH_COUNT.labels(outcome="UNEXPECTED").inc()
            raise UnexpectedError(details=str(e)) from e
        CALENDAR_FETCH_COUNT.labels(outcome="OK").inc()
        return result

    def _run(self, token: Optional[str], code: Optional[str], now: Optional[datetime]) -> FetchUpcomingEventsResult:
        if not token:
            raise MissingInputError()
        identity = self.verifier.verify(token, self.config.client_id)
        if code:
            identity = VerifiedIdentity(
                subject=identity.subject,
                access_token=self.exchanger.exchange_code(code),
                access_token_source=AccessTokenSource.EXCHANGED,
                email=identity.email,
                claims=identity.claims,
            )
        logger.info("verified subject %s (access token from %s)", identity.subject, identity.access_token_source.value)
        events = self.query.list_upcoming_events(
            identity.access_token, now=now, max_results=self.config.max_results
        )
        return FetchUpcomingEventsResult(identity=identity, events=events)
