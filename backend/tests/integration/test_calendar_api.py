"""Request/response behaviour of POST /api/calendar."""
import httplib2
import pytest
from googleapiclient.errors import HttpError

from calview.errors import InvalidCredentialError, VerificationUnavailableError


def test_missing_token_returns_400(client):
    r = client.post("/api/calendar", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "Token is required"
    assert r.json()["code"] == "TOKEN_REQUIRED"


def test_empty_token_returns_400(client, verifier):
    r = client.post("/api/calendar", json={"token": ""})
    assert r.status_code == 400
    verifier.verify.assert_not_called()


def test_missing_body_returns_400(client):
    r = client.post("/api/calendar")
    assert r.status_code == 400
    assert r.json()["error"] == "Token is required"


def test_success_returns_ordered_events(client, provider):
    r = client.post("/api/calendar", json={"token": "id.token.value"})
    assert r.status_code == 200
    body = r.json()
    assert [e["id"] for e in body] == ["evt-1", "evt-2", "evt-3"]
    assert set(body[0]["start"]) == {"dateTime"}
    assert body[2]["start"] == {"date": "2025-08-20"}
    assert body[1]["start"]["timeZone"] == "Europe/Berlin"
    assert "status" not in body[0]
    assert provider.calls[0]["calendar_id"] == "primary"


def test_code_exchange_path(client, exchanger):
    r = client.post("/api/calendar", json={"token": "id.token.value", "code": "4/0AX"})
    assert r.status_code == 200
    exchanger.exchange_code.assert_called_once_with("4/0AX")


def test_invalid_token_returns_401(client, verifier):
    verifier.verify.side_effect = InvalidCredentialError(details="Token expired")
    r = client.post("/api/calendar", json={"token": "id.token.value"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid token", "code": "INVALID_CREDENTIAL", "details": "Token expired"}


def test_verification_unavailable_returns_503(client, verifier):
    verifier.verify.side_effect = VerificationUnavailableError(details="Could not fetch certificates")
    r = client.post("/api/calendar", json={"token": "id.token.value"})
    assert r.status_code == 503
    assert r.json()["code"] == "VERIFICATION_UNAVAILABLE"


@pytest.mark.parametrize("status,expected_status,expected_code", [
    (401, 401, "UNAUTHORIZED"),
    (403, 401, "UNAUTHORIZED"),
    (500, 502, "UPSTREAM_UNAVAILABLE"),
    (503, 502, "UPSTREAM_UNAVAILABLE"),
])
def test_calendar_api_errors(client, provider, status, expected_status, expected_code):
    provider.error = HttpError(httplib2.Response({"status": status}), b'{"error": {"message": "boom"}}')
    r = client.post("/api/calendar", json={"token": "id.token.value"})
    assert r.status_code == expected_status
    assert r.json()["code"] == expected_code
    assert "details" in r.json()


def test_unexpected_error_returns_500(client, provider):
    provider.error = KeyError("items")
    r = client.post("/api/calendar", json={"token": "id.token.value"})
    assert r.status_code == 500
    data = r.json()
    assert data["error"] == "Failed to fetch calendar events"
    assert data["code"] == "UNEXPECTED"
    assert "items" in data["details"]
