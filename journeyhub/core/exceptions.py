"""
Domain errors raised by the services.

Services raise these untranslated; the HTTP layer maps ``status_code`` onto
the response. Background work never lets them escape a cycle.
"""
from typing import Optional


class JourneyHubError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"


class NotFoundError(JourneyHubError):
    """Referenced user, journey or link does not exist."""
    status_code = 404


class ConflictError(JourneyHubError):
    """Duplicate creation, e.g. a second journey for the same user and start time."""
    status_code = 409


class GoneError(JourneyHubError):
    """Operation on a public link that is already revoked or consumed."""
    status_code = 410


# Messages shared by services and tests
USER_NOT_FOUND = "User not found"
USER_ALREADY_EXISTS = "User already exists"
JOURNEY_NOT_FOUND = "Journey not found"
JOURNEY_ALREADY_EXISTS = "Journey already exists for this user and start time"
PUBLIC_LINK_NOT_FOUND = "Public link not found"
PUBLIC_LINK_REVOKED = "Public link has been revoked"
