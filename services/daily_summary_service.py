from datetime import date, timedelta
from typing import Optional
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.context import UserContext
from domain.mappers import SummaryMapper
from domain.models import AppUser
from domain.schemas.nutrition_schemas import (
    DailySummaryResponse,
    MacroTotals,
    WeeklySummaryResponse,
)
from repositories import DailySummaryRepository, MacroDelta, MealRepository
from services.profile_service import ProfileService

logger = logging.getLogger("fitva.summary")


class DailySummaryService:
    """Running per-day totals, kept in step with the meal log"""

    @staticmethod
    def current_goal(user: AppUser) -> float:
        """Goal used for new summary rows and for days without a row"""
        if user.target_calories is not None:
            return float(user.target_calories)
        return float(settings.default_calorie_goal)

    @staticmethod
    def apply_delta(
        db: Session, user: AppUser, day: date, delta: MacroDelta, commit: bool = True
    ) -> None:
        """
        Add a signed delta to (user, day).

        Creates the row seeded with the user's current target when missing;
        otherwise the stored goal is left as it was. The caller passes
        ``commit=False`` to make this part of the meal write's transaction.
        """
        if delta.is_zero():
            return
        DailySummaryRepository(db).apply_delta(
            user.user_id,
            day,
            delta,
            goal_calories=DailySummaryService.current_goal(user),
            commit=commit,
        )

    @staticmethod
    def get_summary(
        db: Session, ctx: UserContext, day: date, user: Optional[AppUser] = None
    ) -> DailySummaryResponse:
        """
        Totals for one day, with remaining calories and goal percentage.

        remaining = goal - total (may be negative); percentage is clamped to 100.
        Days without a row report zero totals against the user's current goal.
        """
        user = user or ProfileService.require_user(db, ctx)
        summary = DailySummaryRepository(db).get_for_date(user.user_id, day)
        return SummaryMapper.to_response(
            day, summary, DailySummaryService.current_goal(user)
        )

    @staticmethod
    def get_weekly_summary(
        db: Session, ctx: UserContext, end_date: date, days: int = 7
    ) -> WeeklySummaryResponse:
        """Seven consecutive days ending at ``end_date`` with totals and averages"""
        user = ProfileService.require_user(db, ctx)
        start_date = end_date - timedelta(days=days - 1)
        rows = {
            s.summary_date: s
            for s in DailySummaryRepository(db).get_range(user.user_id, start_date, end_date)
        }
        fallback_goal = DailySummaryService.current_goal(user)

        day_views = [
            SummaryMapper.to_response(
                start_date + timedelta(days=offset),
                rows.get(start_date + timedelta(days=offset)),
                fallback_goal,
            )
            for offset in range(days)
        ]

        totals = MacroTotals(
            calories=sum(d.totals.calories for d in day_views),
            protein=sum(d.totals.protein for d in day_views),
            carbs=sum(d.totals.carbs for d in day_views),
            fats=sum(d.totals.fats for d in day_views),
        )
        # a day counts as logged when it has meals, whatever their calories
        meal_counts = MealRepository(db).count_by_day(user.user_id, start_date, end_date)
        days_logged = len(meal_counts)
        divisor = days_logged or 1
        averages = MacroTotals(
            calories=totals.calories / divisor,
            protein=totals.protein / divisor,
            carbs=totals.carbs / divisor,
            fats=totals.fats / divisor,
        )

        return WeeklySummaryResponse(
            start_date=start_date,
            end_date=end_date,
            days=day_views,
            totals=totals,
            averages=averages,
            days_logged=days_logged,
        )

    @staticmethod
    def rebuild_summary(db: Session, ctx: UserContext, day: date) -> DailySummaryResponse:
        """
        Recompute (user, day) from the meal log.

        Reconciliation helper: the stored goal snapshot is kept, only the
        totals are replaced by the sum of the day's meals.
        """
        user = ProfileService.require_user(db, ctx)
        sums = MealRepository(db).sum_macros_for_day(user.user_id, day)
        repo = DailySummaryRepository(db)
        existing = repo.get_for_date(user.user_id, day)
        if existing is None and sums["meal_count"] == 0:
            return SummaryMapper.to_response(day, None, DailySummaryService.current_goal(user))

        summary = repo.replace_totals(
            user.user_id,
            day,
            MacroDelta(
                calories=sums["calories"],
                protein=sums["protein"],
                carbs=sums["carbs"],
                fats=sums["fats"],
            ),
            goal_calories=DailySummaryService.current_goal(user),
        )
        logger.info(
            f"summary_rebuilt user_id={user.user_id} date={day} "
            f"meals={sums['meal_count']} calories={summary.total_calories}"
        )
        return SummaryMapper.to_response(day, summary, DailySummaryService.current_goal(user))
