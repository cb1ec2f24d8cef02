"""
Request context passed explicitly into every service call.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class UserContext:
    """Authenticated identity supplied by the auth layer for one request."""

    user_id: UUID
    request_id: Optional[str] = None
