"""
Service error kinds.

Every error carries the HTTP status it maps to and the message returned to
the client as ``{"error": message}``.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied"


class InvalidToken(ServiceError):
    """Bad signature, malformed payload or expiry; callers cannot tell which."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class DuplicateUsername(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InvalidCredentials(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid username or password"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Blog not found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized"


class InvalidUpload(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid image upload"


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class StoreFailure(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database error"
