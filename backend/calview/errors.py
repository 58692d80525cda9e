from typing import Optional

from fastapi import status


class BaseAppException(Exception):
    def __init__(self, code: str, message: str, http_status: int, details: Optional[str] = None):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)

    def to_payload(self) -> dict:
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload

class MissingInputError(BaseAppException):
    def __init__(self, message: str = "Token is required"):
        super().__init__("TOKEN_REQUIRED", message, status.HTTP_400_BAD_REQUEST)

class InvalidCredentialError(BaseAppException):
    def __init__(self, message: str = "Invalid token", details: Optional[str] = None):
        super().__init__("INVALID_CREDENTIAL", message, status.HTTP_401_UNAUTHORIZED, details)

class VerificationUnavailableError(BaseAppException):
    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "VERIFICATION_UNAVAILABLE",
            "Identity provider unavailable, please try again",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            details,
        )

class UnauthorizedError(BaseAppException):
    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "UNAUTHORIZED",
            "Session invalid, please re-authenticate",
            status.HTTP_401_UNAUTHORIZED,
            details,
        )

class UpstreamUnavailableError(BaseAppException):
    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "UPSTREAM_UNAVAILABLE",
            "Calendar service unavailable, please try again",
            status.HTTP_502_BAD_GATEWAY,
            details,
        )

class UnexpectedError(BaseAppException):
    def __init__(self, details: Optional[str] = None, code: str = "UNEXPECTED",
                 message: str = "Failed to fetch calendar events"):
        super().__init__(code, message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)

class ConfigurationError(UnexpectedError):
    def __init__(self, message: str):
        super().__init__(details=message, code="CONFIG_MISSING")
