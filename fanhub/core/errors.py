"""
Domain error taxonomy.

Core services raise only these exceptions. Each class carries the HTTP status
the API layer responds with, so route handlers never translate errors by hand;
a single exception handler installed in fanhub.main renders them.
"""

from fastapi import status


class FanhubError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    detail: str = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class UnauthorizedError(FanhubError):
    """No credential, an invalid credential, or the account no longer exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"


class ForbiddenError(FanhubError):
    """Authenticated, but banned, under-privileged or not age verified."""

    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class NotFoundError(FanhubError):
    """Referenced entity is absent or not visible to the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class ValidationError(FanhubError):
    """Malformed input, including unique-constraint violations on user-chosen values."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"


class ConflictError(FanhubError):
    """A concurrent writer won a race on a uniqueness constraint."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Conflict"


class InvalidTransitionError(FanhubError):
    """State-machine violation, e.g. reviewing a report that is already closed."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Invalid state transition"
