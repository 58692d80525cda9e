"""Domain enumerations for strong typing & validation."""
from enum import Enum

class SessionState(str, Enum):
    LOGGED_OUT = "LoggedOut"
    AUTHENTICATING = "Authenticating"
    LOGGED_IN = "LoggedIn"

class AccessTokenSource(str, Enum):
    EXCHANGED = "exchanged"
    CLAIM = "claim"
    # identity token reused as-is; the calendar API may still reject it
    IDENTITY_TOKEN = "identity_token"
