"""Domain exceptions raised by services and dependencies.

Each exception carries the HTTP status and the public message used by the
API error handlers. Messages are safe to show to clients; internal detail
belongs in the logs, never in these.
"""

from fastapi import status


class ServiceError(Exception):
    """Base exception for service-layer failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "ServerError"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed input, with optional per-field messages."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "ValidationError"
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, fields: dict[str, str] | None = None):
        self.fields = fields or {}
        super().__init__(message)


class ConflictError(ServiceError):
    """Entity already exists, or the requested state change already happened."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "Conflict"
    default_message = "Conflict"


class NotFoundError(ServiceError):
    """Entity not found in database."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NotFound"

    def __init__(self, entity_type: str, identifier: str | int | None = None):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} not found")


class UnauthenticatedError(ServiceError):
    """No credential was presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "Unauthenticated"
    default_message = "Not authenticated"


class InvalidCredentialsError(ServiceError):
    """Login failed. Same message for unknown email and wrong password."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "InvalidCredentials"
    default_message = "Invalid email or password"


class ForbiddenError(ServiceError):
    """Credential invalid or expired, or the actor does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "Forbidden"
    default_message = "Forbidden"


class NotVerifiedError(ServiceError):
    """Account exists but its email has not been verified yet."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "NotVerified"
    default_message = "email_not_verified"


class TokenExpiredError(ServiceError):
    """Account token is past its expiry."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "Expired"
    default_message = "Token has expired"


class TokenInvalidError(ServiceError):
    """Account token already used or issued for a different purpose."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "Invalid"
    default_message = "Invalid token"


class UpstreamError(ServiceError):
    """Blob store or email provider failure."""

    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "UpstreamFailure"
    default_message = "Upstream service unavailable"
