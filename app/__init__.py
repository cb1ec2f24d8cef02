"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and the per-request user context.
"""

from app.config import settings
from app.context import UserContext
from app.exceptions import (
    ServiceError,
    ServiceValidationError,
    NotFoundError,
    ConflictError,
    UnauthorizedError,
    UpstreamError,
    MalformedResponseError,
)

__all__ = [
    "settings",
    "UserContext",
    "ServiceError",
    "ServiceValidationError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "UpstreamError",
    "MalformedResponseError",
]
