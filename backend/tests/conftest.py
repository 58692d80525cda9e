import os, sys
import pytest
from unittest.mock import Mock
from fastapi.testclient import TestClient

# Ensure package import path
backend_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

from calview.api.calendar import get_fetch_usecase  # noqa: E402
from calview.config import AppConfig  # noqa: E402
from calview.domain.enums import AccessTokenSource  # noqa: E402
from calview.domain.models import VerifiedIdentity  # noqa: E402
from calview.main import create_app  # noqa: E402
from calview.services.calendar_query import CalendarQueryService  # noqa: E402
from calview.services.token_verifier import CodeExchanger, TokenVerifier  # noqa: E402
from calview.usecases.fetch_upcoming_events import FetchUpcomingEventsUseCase  # noqa: E402

VALID_TOKEN = "header.payload.signature"


class FakeProvider:
    """In-memory stand-in for the Google Calendar list call."""

    def __init__(self, items=None, error=None):
        self.items = list(items or [])
        self.error = error
        self.calls = []

    def list_events(self, calendar_id, time_min_iso, max_results):
        self.calls.append({"calendar_id": calendar_id, "time_min": time_min_iso, "max_results": max_results})
        if self.error is not None:
            raise self.error
        return {"items": self.items[:max_results]}


@pytest.fixture
def three_items():
    return [
        {
            "id": "evt-1",
            "summary": "Standup",
            "status": "confirmed",
            "start": {"dateTime": "2025-08-13T10:00:00Z"},
            "end": {"dateTime": "2025-08-13T10:15:00Z"},
        },
        {
            "id": "evt-2",
            "summary": "Design review",
            "start": {"dateTime": "2025-08-15T09:00:00+02:00", "timeZone": "Europe/Berlin"},
            "end": {"dateTime": "2025-08-15T10:30:00+02:00", "timeZone": "Europe/Berlin"},
        },
        {
            "id": "evt-3",
            "summary": "Offsite",
            "start": {"date": "2025-08-20"},
            "end": {"date": "2025-08-21"},
        },
    ]


@pytest.fixture
def config():
    return AppConfig(client_id="test-client-id", client_secret="test-secret")


@pytest.fixture
def identity():
    return VerifiedIdentity(
        subject="1234567890",
        access_token="ya29.access",
        access_token_source=AccessTokenSource.CLAIM,
        email="user@example.com",
    )


@pytest.fixture
def verifier(identity):
    v = Mock(spec=TokenVerifier)
    v.verify.return_value = identity
    return v


@pytest.fixture
def exchanger():
    ex = Mock(spec=CodeExchanger)
    ex.exchange_code.return_value = "ya29.exchanged"
    return ex


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def provider(three_items):
    return FakeProvider(three_items)


@pytest.fixture
def app(config, verifier, exchanger, provider):
    application = create_app(config)
    application.dependency_overrides[get_fetch_usecase] = lambda: FetchUpcomingEventsUseCase(
        config,
        verifier=verifier,
        query=CalendarQueryService(lambda token: provider),
        exchanger=exchanger,
    )
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
