"""Application exceptions for the DocShare API.

Every exception carries the HTTP status it is rendered with, so services can
raise them without knowing about FastAPI and the app-level handler can turn
them into ``{"error": ...}`` responses.
"""

from fastapi import status


class DocShareError(Exception):
    """Base exception for all DocShare errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DocShareError):
    """Raised when required input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class Unauthenticated(DocShareError):
    """Raised when a route requires a token and none was sent."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token required"


class InvalidCredential(DocShareError):
    """Raised when a token is forged, malformed or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class Forbidden(DocShareError):
    """Raised when the caller may not act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action."


class NotFound(DocShareError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class Conflict(DocShareError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


class InternalError(DocShareError):
    pass
