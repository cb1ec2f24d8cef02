"""
Response models shared by the routers.
Error bodies are produced by the handlers in api.middleware; these models
document them in the OpenAPI schema.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Additional error details")
    retryable: Optional[bool] = Field(
        None, description="Set on upstream failures that may succeed on retry"
    )


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(default_factory=_now, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    database: str = Field(..., description="ok | unavailable")
    timestamp: datetime = Field(default_factory=_now, description="Check timestamp")


class DeletedResponse(BaseModel):
    status: str = "ok"
    deleted: str


def error_responses(*codes: int) -> dict:
    """``responses=`` mapping for route decorators"""
    return {code: {"model": ErrorResponse} for code in codes}
