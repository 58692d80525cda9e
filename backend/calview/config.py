"""Process configuration.

Built once at startup and handed to ``create_app``; nothing below reads the
environment after that point.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_REDIRECT_URI = "http://localhost:5173"
DEFAULT_PORT = 3000
DEFAULT_MAX_RESULTS = 10

_TRUTHY = {"1", "true", "TRUE", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    port: int = DEFAULT_PORT
    cors_allow_origins: Tuple[str, ...] = field(default=(DEFAULT_REDIRECT_URI,))
    max_results: int = DEFAULT_MAX_RESULTS

    def __post_init__(self):
        if self.port <= 0:
            raise ValueError(f"port must be positive, got {self.port}")
        if self.max_results <= 0:
            raise ValueError(f"max_results must be positive, got {self.max_results}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Read settings from the environment (``.env`` only when APP_LOAD_DOTENV is set)."""
        if environ is None:
            if os.getenv("APP_LOAD_DOTENV") in _TRUTHY:  # pragma: no cover
                # Respect existing env (override=False)
                load_dotenv(override=False)
            environ = os.environ
        cors_env = environ.get("CORS_ALLOW_ORIGINS")
        if cors_env:
            origins = tuple(o.strip() for o in cors_env.split(",") if o.strip())
        else:
            origins = (DEFAULT_REDIRECT_URI,)
        return cls(
            client_id=environ.get("GOOGLE_CLIENT_ID") or environ.get("VITE_GOOGLE_CLIENT_ID"),
            client_secret=environ.get("GOOGLE_CLIENT_SECRET"),
            redirect_uri=environ.get("GOOGLE_REDIRECT_URI", DEFAULT_REDIRECT_URI),
            port=int(environ.get("PORT", DEFAULT_PORT)),
            cors_allow_origins=origins,
            max_results=int(environ.get("CALENDAR_MAX_RESULTS", DEFAULT_MAX_RESULTS)),
        )
