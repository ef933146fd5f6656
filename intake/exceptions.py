"""Application exceptions rendered by the handlers in ``intake.main``."""

from typing import Any

from fastapi import status


class IntakeError(Exception):
    """Base exception; subclasses fix ``code`` and ``status_code``."""

    code = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code or self.code
        self.status_code = status_code or self.status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(IntakeError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: str | None = None):
        if identifier:
            super().__init__(f"{resource} with id '{identifier}' not found")
        else:
            super().__init__(f"{resource} not found")


class ValidationError(IntakeError):
    """A business rule rejected the request data."""

    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, details={"field": field} if field else None)


class AuthenticationError(IntakeError):
    """Missing or invalid identity token."""

    code = "authentication_error"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ConflictError(IntakeError):
    """The write would break a uniqueness or once-only rule."""

    code = "conflict"
    status_code = status.HTTP_409_CONFLICT
