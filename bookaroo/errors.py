"""Domain errors raised by the booking services.

Services raise these and leave reporting to the API layer, which maps each
class to an HTTP status through ``status_code``.
"""

from fastapi import status


class BookarooError(Exception):
    """Base class for recoverable, request-scoped failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(BookarooError):
    """A referenced property, guest, or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(BookarooError):
    """The request collides with existing state (overlapping stay, taken email)."""

    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(BookarooError):
    """The caller is not allowed to act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(BookarooError):
    """Input is well-formed but semantically invalid, e.g. a non-positive stay."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
