from typing import Optional
from sqlalchemy.orm import Session
import logging

from app.context import UserContext
from app.exceptions import NotFoundError
from domain.models import AppUser
from domain.schemas.profile_schemas import UserCreate, ProfileUpdateRequest
from repositories import UserRepository
from services.tdee_calculator import calculate_targets

logger = logging.getLogger("fitva.profile")

_TARGET_INPUTS = ("age", "gender", "height_cm", "weight_kg", "activity_level", "goal")


class ProfileService:
    """Business logic for user profiles and their calorie target"""

    @staticmethod
    def compute_target_calories(user) -> Optional[int]:
        """Goal-adjusted target, or None while any biometric is unknown.

        Accepts anything carrying the biometric attributes (ORM row or schema).
        """
        if None in (user.age, user.gender, user.height_cm, user.weight_kg):
            return None
        return calculate_targets(
            weight_kg=user.weight_kg,
            height_cm=user.height_cm,
            age=user.age,
            gender=user.gender,
            activity_level=user.activity_level,
            goal=user.goal,
        ).target_calories

    @staticmethod
    def require_user(db: Session, ctx: UserContext) -> AppUser:
        """Load the caller's user row or raise NotFoundError"""
        user = UserRepository(db).get_by_id(ctx.user_id)
        if not user:
            logger.warning(f"profile_not_found user_id={ctx.user_id}")
            raise NotFoundError(f"User {ctx.user_id} not found")
        return user

    @staticmethod
    def create_user(db: Session, data: UserCreate) -> AppUser:
        """Register a user; the target is computed when biometrics are complete"""
        fields = data.model_dump(exclude={"email", "full_name"})
        target = ProfileService.compute_target_calories(data)

        user = UserRepository(db).create_user(
            email=data.email,
            full_name=data.full_name,
            target_calories=target,
            **fields,
        )
        logger.info(f"user_created user_id={user.user_id} target_calories={target}")
        return user

    @staticmethod
    def get_profile(db: Session, ctx: UserContext) -> AppUser:
        user = ProfileService.require_user(db, ctx)
        logger.info(f"profile_fetched user_id={ctx.user_id}")
        return user

    @staticmethod
    def update_profile(
        db: Session, ctx: UserContext, data: ProfileUpdateRequest
    ) -> AppUser:
        """
        Apply a partial profile update.

        The calorie target is recomputed whenever a biometric, the activity
        level or the goal changes. Existing daily summaries keep the goal they
        were created with.
        """
        user = ProfileService.require_user(db, ctx)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in ("activity_level", "goal")
        }

        for field, value in changes.items():
            setattr(user, field, value)

        if any(field in changes for field in _TARGET_INPUTS):
            user.target_calories = ProfileService.compute_target_calories(user)

        user = UserRepository(db).update(user)
        logger.info(
            f"profile_updated user_id={ctx.user_id} fields={sorted(changes)} "
            f"target_calories={user.target_calories}"
        )
        return user

    @staticmethod
    def delete_user(db: Session, ctx: UserContext) -> None:
        """Delete the caller and, by cascade, their meals, goals and summaries"""
        if not UserRepository(db).delete_user(ctx.user_id):
            raise NotFoundError(f"User {ctx.user_id} not found")
        logger.info(f"user_deleted user_id={ctx.user_id}")
