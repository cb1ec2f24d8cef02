from typing import Any, Mapping, Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: machine-readable error code used in the API error envelope
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_code = "SERVICE_ERROR"
    default_message = "Service error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ServiceError):
    """Raised when client input is invalid; always before any external call."""

    http_status = 400
    default_code = "SERVICE_VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFoundError(ServiceError):
    """Raised when a requested resource was not found (or is owned by someone else)."""

    http_status = 404
    default_code = "NOT_FOUND"
    default_message = "Not found"


class ConflictError(ServiceError):
    """Raised when a write is stale or collides with existing data."""

    http_status = 409
    default_code = "CONFLICT"
    default_message = "Conflict"


class UnauthorizedError(ServiceError):
    """Raised when no usable user identity accompanies the request."""

    http_status = 401
    default_code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class UpstreamError(ServiceError):
    """The text-generation provider was unreachable, timed out or returned an error.

    Recoverable: the caller may retry the same request.
    """

    http_status = 502
    default_code = "UPSTREAM_ERROR"
    default_message = "Nutrition provider is unavailable, please retry"
    retryable = True

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["retryable"] = self.retryable
        return payload


class MalformedResponseError(UpstreamError):
    """The provider answered, but the content was not valid JSON or failed schema checks."""

    default_code = "MALFORMED_RESPONSE"
    default_message = "Nutrition provider returned an unusable response, please retry"
