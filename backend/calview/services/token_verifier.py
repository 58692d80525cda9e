"""Identity credential verification and access credential exchange.

The verifier checks a Google ID token against Google's public signing keys
and the configured audience. The exchanger trades an authorization code for
a calendar access token using the configured OAuth client.
"""
import logging
from typing import Any, Callable, Dict, Optional

import requests
from google.auth import exceptions as google_exceptions
from google.auth.transport.requests import Request as GoogleRequest
from google.oauth2 import id_token
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from ..config import AppConfig
from ..domain.enums import AccessTokenSource
from ..domain.models import VerifiedIdentity
from ..errors import ConfigurationError, InvalidCredentialError, VerificationUnavailableError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


class TokenVerifier:
    """Stateless verifier for Google ID tokens."""

    def __init__(self, request_factory: Callable[[], Any] = GoogleRequest):
        self._request_factory = request_factory

    def verify(self, credential: Optional[str], expected_audience: Optional[str]) -> VerifiedIdentity:
        if not credential or not credential.strip():
            raise InvalidCredentialError(details="credential is empty")
        # a JWT always has three dot-separated segments
        if credential.count(".") != 2:
            raise InvalidCredentialError(details="credential is malformed")
        if not expected_audience:
            raise ConfigurationError("Google client id not configured")

        try:
            payload = id_token.verify_oauth2_token(credential, self._request_factory(), expected_audience)
        except google_exceptions.TransportError as e:
            logger.warning("could not fetch identity provider certificates: %s", e)
            raise VerificationUnavailableError(details=str(e))
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.warning("identity credential rejected: %s", e)
            raise InvalidCredentialError(details=str(e))

        if not payload or not payload.get("sub"):
            raise InvalidCredentialError(details="payload has no subject")
        return self._identity_from_payload(credential, payload)

    def _identity_from_payload(self, credential: str, payload: Dict[str, Any]) -> VerifiedIdentity:
        access_token = payload.get("access_token")
        if access_token:
            source = AccessTokenSource.CLAIM
        else:
            # Best effort: the calendar API is not guaranteed to accept an ID token.
            logger.warning("no access token in identity payload, reusing identity credential")
            access_token = credential
            source = AccessTokenSource.IDENTITY_TOKEN
        return VerifiedIdentity(
            subject=payload["sub"],
            access_token=access_token,
            access_token_source=source,
            email=payload.get("email"),
            claims=dict(payload),
        )


class CodeExchanger:
    """Authorization-code grant against Google's token endpoint."""

    def __init__(self, config: AppConfig):
        self.client_id = config.client_id
        self.client_secret = config.client_secret
        self.redirect_uri = config.redirect_uri

    def _build_flow(self) -> Flow:
        return Flow.from_client_config(
            {
                "web": {
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "auth_uri": GOOGLE_AUTH_URI,
                    "token_uri": GOOGLE_TOKEN_URI,
                }
            },
            scopes=CALENDAR_SCOPES,
            redirect_uri=self.redirect_uri,
        )

    def exchange_code(self, code: str) -> str:
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("Google OAuth credentials not configured")
        flow = self._build_flow()
        try:
            flow.fetch_token(code=code)
        except requests.RequestException as e:
            logger.warning("token endpoint unreachable: %s", e)
            raise VerificationUnavailableError(details=str(e))
        except OAuth2Error as e:
            logger.warning("authorization code rejected: %s", e)
            raise InvalidCredentialError("Invalid authorization code", details=str(e))
        token = flow.credentials.token
        if not token:
            raise InvalidCredentialError("Invalid authorization code", details="no access token issued")
        return token
