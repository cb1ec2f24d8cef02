from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.context import UserContext
from app.exceptions import ConflictError, NotFoundError, ServiceValidationError
from domain.enums import MealType
from domain.mappers import MealMapper
from domain.models import Meal, utcnow
from domain.schemas.meal_schemas import MealCreate, MealUpdate
from repositories import MacroDelta, MealRepository, round_macro
from services.daily_summary_service import DailySummaryService
from services.nutrition_estimator import NutritionEstimator
from services.profile_service import ProfileService

logger = logging.getLogger("fitva.meals")

_CORE_MACROS = ("calories", "protein", "carbs", "fats")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; aware inputs are converted first"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class MealService:
    """
    Meal log operations.

    Each mutation writes the meal and the affected daily-summary deltas in
    one transaction: either both land or neither does.
    """

    @staticmethod
    def _get_owned(db: Session, ctx: UserContext, meal_id: UUID) -> Meal:
        meal = MealRepository(db).get_for_user(ctx.user_id, meal_id)
        if not meal:
            # meals of other users are reported as missing
            logger.warning(f"meal_not_found user_id={ctx.user_id} meal_id={meal_id}")
            raise NotFoundError(f"Meal {meal_id} not found")
        return meal

    @staticmethod
    def create_meal(
        db: Session,
        ctx: UserContext,
        data: MealCreate,
        estimator: Optional[NutritionEstimator] = None,
    ) -> Meal:
        """
        Log a meal and add its macros to that day's summary.

        When the request carries no macros the description is estimated
        first; provider failures surface as UpstreamError or
        MalformedResponseError and nothing is written.
        """
        user = ProfileService.require_user(db, ctx)
        values = data.model_dump(exclude={"raw_response"})
        raw_response = MealMapper.encode_raw(data.raw_response)

        if not data.has_macros:
            if estimator is None:
                raise ServiceValidationError(
                    "Macros are required when estimation is unavailable"
                )
            result = estimator.estimate(data.description, data.quantity)
            estimate = result.unwrap()
            values.update(estimate.model_dump(exclude={"notes"}))
            raw_response = result.raw_response

        values["eaten_at"] = to_naive_utc(values.get("eaten_at")) or utcnow()
        for field in _CORE_MACROS:
            values[field] = round_macro(values[field])
        meal = Meal(user_id=user.user_id, raw_response=raw_response, **values)

        try:
            MealRepository(db).create(meal, commit=False)
            DailySummaryService.apply_delta(
                db, user, meal.eaten_at.date(), MacroDelta.of(meal), commit=False
            )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"meal_create_failed user_id={ctx.user_id}")
            raise
        db.refresh(meal)

        logger.info(
            f"meal_created user_id={ctx.user_id} meal_id={meal.meal_id} "
            f"date={meal.eaten_at.date()} calories={meal.calories} "
            f"estimated={not data.has_macros}"
        )
        return meal

    @staticmethod
    def list_meals(
        db: Session,
        ctx: UserContext,
        day: Optional[date] = None,
        meal_type: Optional[MealType] = None,
    ) -> List[Meal]:
        """The caller's meals, newest first"""
        return MealRepository(db).list_by_user(ctx.user_id, day=day, meal_type=meal_type)

    @staticmethod
    def get_meal(db: Session, ctx: UserContext, meal_id: UUID) -> Meal:
        return MealService._get_owned(db, ctx, meal_id)

    @staticmethod
    def update_meal(
        db: Session, ctx: UserContext, meal_id: UUID, patch: MealUpdate
    ) -> Meal:
        """
        Edit a meal and move its macros between summaries as needed.

        Conflict policy is last-write-wins by edit time: if ``client_updated_at``
        is given and the meal was modified after it, the write is stale and
        rejected with ConflictError.
        """
        user = ProfileService.require_user(db, ctx)
        meal = MealService._get_owned(db, ctx, meal_id)

        changes = patch.model_dump(exclude_unset=True, exclude={"client_updated_at"})
        cleared = [f for f in _CORE_MACROS if f in changes and changes[f] is None]
        if cleared:
            raise ServiceValidationError(
                "Core macros cannot be cleared", details={"fields": cleared}
            )
        for field in ("description", "meal_type", "eaten_at"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        seen_at = to_naive_utc(patch.client_updated_at)
        if seen_at is not None and meal.updated_at > seen_at:
            raise ConflictError(
                f"Meal {meal_id} was modified after {patch.client_updated_at.isoformat()}",
                details={"updated_at": meal.updated_at.isoformat()},
            )

        old_day = meal.eaten_at.date()
        old_macros = MacroDelta.of(meal)

        if "eaten_at" in changes:
            changes["eaten_at"] = to_naive_utc(changes["eaten_at"])
        for field in _CORE_MACROS:
            if field in changes:
                changes[field] = round_macro(changes[field])
        for field, value in changes.items():
            setattr(meal, field, value)

        new_day = meal.eaten_at.date()
        new_macros = MacroDelta.of(meal)

        try:
            MealRepository(db).update(meal, commit=False)
            if new_day == old_day:
                DailySummaryService.apply_delta(
                    db, user, new_day, new_macros - old_macros, commit=False
                )
            else:
                DailySummaryService.apply_delta(db, user, old_day, -old_macros, commit=False)
                DailySummaryService.apply_delta(db, user, new_day, new_macros, commit=False)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"meal_update_failed user_id={ctx.user_id} meal_id={meal_id}")
            raise
        db.refresh(meal)

        logger.info(
            f"meal_updated user_id={ctx.user_id} meal_id={meal_id} "
            f"fields={sorted(changes)} old_date={old_day} new_date={new_day}"
        )
        return meal

    @staticmethod
    def delete_meal(db: Session, ctx: UserContext, meal_id: UUID) -> None:
        """Delete a meal and subtract its macros from that day's summary"""
        user = ProfileService.require_user(db, ctx)
        meal = MealService._get_owned(db, ctx, meal_id)
        day = meal.eaten_at.date()
        delta = -MacroDelta.of(meal)

        try:
            MealRepository(db).delete(meal, commit=False)
            DailySummaryService.apply_delta(db, user, day, delta, commit=False)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(f"meal_delete_failed user_id={ctx.user_id} meal_id={meal_id}")
            raise

        logger.info(f"meal_deleted user_id={ctx.user_id} meal_id={meal_id} date={day}")
