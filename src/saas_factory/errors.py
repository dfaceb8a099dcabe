"""Application error taxonomy.

Every error raised by services and routers derives from AppError and is turned
into the `{"success": false, "error": ...}` envelope by the handlers registered
in main.py.
"""

from http import HTTPStatus
from typing import Any


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred. Please try again later."

    def __init__(self, message: str | None = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Some required fields are missing or invalid."


class AuthenticationRequired(AppError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Authentication required."


class PermissionDenied(AppError):
    status_code = HTTPStatus.FORBIDDEN
    default_message = "You do not have permission to perform this action."


class NotFound(AppError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "The requested resource was not found."


class Conflict(AppError):
    status_code = HTTPStatus.CONFLICT
    default_message = "The request conflicts with the current state of the resource."


class UpstreamFailure(AppError):
    status_code = HTTPStatus.BAD_GATEWAY
    default_message = "An external service returned an error."


class ServiceUnavailable(AppError):
    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    default_message = "This feature is not configured on the server."


class GenerationTimeout(AppError):
    status_code = HTTPStatus.GATEWAY_TIMEOUT
    default_message = "The request timed out. Please try again."


def mask_secrets(message: str, secrets: list[str | None]) -> str:
    """Replace caller-supplied secrets in a message before it is echoed back."""
    for secret in secrets:
        if secret:
            message = message.replace(secret, "***")
    return message
