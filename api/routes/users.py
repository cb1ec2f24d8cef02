"""User registration and profile routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_current_user, get_db
from api.responses import DeletedResponse, error_responses
from app.context import UserContext
from domain.schemas.profile_schemas import (
    ProfileUpdateRequest,
    UserCreate,
    UserProfileResponse,
)
from services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("fitva.api.users")


@router.post(
    "",
    response_model=UserProfileResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(409),
)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a user. The calorie target is filled in once biometrics are complete."""
    return ProfileService.create_user(db, user)


@router.get("/me", response_model=UserProfileResponse, responses=error_responses(401, 404))
def get_me(
    ctx: UserContext = Depends(get_current_user), db: Session = Depends(get_db)
):
    return ProfileService.get_profile(db, ctx)


@router.put("/me", response_model=UserProfileResponse, responses=error_responses(401, 404))
def update_me(
    profile_data: ProfileUpdateRequest,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Partially update the caller's profile.
    Changing a biometric, the activity level or the goal recomputes target calories.
    """
    return ProfileService.update_profile(db, ctx, profile_data)


@router.delete("/me", response_model=DeletedResponse, responses=error_responses(401, 404))
def delete_me(
    ctx: UserContext = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete the caller and all their meals, goals and summaries."""
    ProfileService.delete_user(db, ctx)
    return DeletedResponse(deleted=str(ctx.user_id))
