"""
API dependencies for dependency injection
"""

from functools import lru_cache
from typing import Generator, Optional
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from adapters.llm_adapter import TextGenerationClient
from app.context import UserContext
from app.exceptions import UnauthorizedError
from domain.models import get_db_session
from repositories import NutritionCacheRepository
from services.insights_service import InsightsService
from services.nutrition_estimator import NutritionEstimator


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user(
    request: Request,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
) -> UserContext:
    """
    Identity of the caller, taken from the ``X-User-ID`` header.

    Authentication is handled upstream of this service; here the header only
    has to be present and hold a UUID.
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-ID header")
    try:
        user_id = UUID(x_user_id.strip())
    except ValueError:
        raise UnauthorizedError(
            "X-User-ID header is not a valid UUID", details={"x_user_id": x_user_id}
        )
    return UserContext(
        user_id=user_id, request_id=getattr(request.state, "request_id", None)
    )


@lru_cache
def get_text_generation_client() -> TextGenerationClient:
    """One provider client per process"""
    return TextGenerationClient()


def get_estimator(
    db: Session = Depends(get_db),
    client: TextGenerationClient = Depends(get_text_generation_client),
) -> NutritionEstimator:
    return NutritionEstimator(client, cache=NutritionCacheRepository(db))


def get_insights_service(
    client: TextGenerationClient = Depends(get_text_generation_client),
) -> InsightsService:
    return InsightsService(client)
