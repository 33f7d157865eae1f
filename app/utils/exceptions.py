"""
Errors raised by the booking core.

Each carries the HTTP status the transport layer answers with; none of them
is fatal to the process or retried.
"""

from fastapi import status


class AppError(Exception):
    """Base class for every error reported back to the caller."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")


class ForbiddenError(AppError):
    """The actor lacks the capability for the operation."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message)


class InvalidStateError(AppError):
    """The operation is not permitted in the entity's current state."""

    status_code = status.HTTP_400_BAD_REQUEST
