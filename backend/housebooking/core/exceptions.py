"""
Domain error taxonomy.

Services raise these instead of building HTTP responses; a single handler in
main.py turns them into `{"error": <tag>, "message": <text>, ...}` bodies.
"""

from typing import Any, Optional

from fastapi import status


class HouseBookingError(Exception):
    """Base class for all errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "INTERNAL_ERROR"

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message, **self.extra}


class Unauthenticated(HouseBookingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "UNAUTHENTICATED"

    def __init__(self, message: str = "Authentication required", **extra: Any):
        super().__init__(message, **extra)


class Forbidden(HouseBookingError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "FORBIDDEN"


class NotFound(HouseBookingError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NOT_FOUND"


class InvalidInput(HouseBookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "INVALID_INPUT"


class Conflict(HouseBookingError):
    status_code = status.HTTP_409_CONFLICT
    error = "CONFLICT"


class InvalidInvitationCode(HouseBookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "INVALID_INVITATION_CODE"

    def __init__(self, message: str = "Invalid or expired invitation code", **extra: Any):
        super().__init__(message, **extra)


class RegistrationFailed(HouseBookingError):
    """Identity validation rejected the new account.

    `errors` is a list of `{"code": ..., "description": ...}` dicts and is
    surfaced verbatim to the client.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error = "REGISTRATION_FAILED"

    def __init__(self, errors: list[dict[str, str]], message: Optional[str] = None):
        super().__init__(
            message or "Registration failed",
            errors=errors,
            details="; ".join(e["description"] for e in errors),
        )
        self.errors = errors
