"""
Meal Repository - Data access layer for the meal log
"""

from collections import Counter
from typing import Dict, List, Optional
from uuid import UUID
from datetime import date, datetime, time, timedelta
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import Meal
from domain.enums import MealType


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) range of naive UTC timestamps for a calendar day"""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class MealRepository(BaseRepository[Meal]):
    """Repository for meal log data access"""

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_by_id(self, meal_id: UUID) -> Optional[Meal]:
        """Get meal by ID"""
        return self.db.query(Meal).filter(Meal.meal_id == meal_id).first()

    def get_for_user(self, user_id: UUID, meal_id: UUID) -> Optional[Meal]:
        """Get a meal only if it belongs to the given user"""
        return (
            self.db.query(Meal)
            .filter(Meal.meal_id == meal_id, Meal.user_id == user_id)
            .first()
        )

    def list_by_user(
        self,
        user_id: UUID,
        day: Optional[date] = None,
        meal_type: Optional[MealType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Meal]:
        """List a user's meals, newest first, optionally filtered by day, type or range"""
        query = self.db.query(Meal).filter(Meal.user_id == user_id)

        if day is not None:
            start, end = day_bounds(day)
        if start is not None:
            query = query.filter(Meal.eaten_at >= start)
        if end is not None:
            query = query.filter(Meal.eaten_at < end)
        if meal_type is not None:
            query = query.filter(Meal.meal_type == meal_type)

        return query.order_by(Meal.eaten_at.desc(), Meal.created_at.desc()).all()

    def count_by_user(self, user_id: UUID) -> int:
        """Total number of meals a user has logged"""
        return (
            self.db.query(func.count(Meal.meal_id))
            .filter(Meal.user_id == user_id)
            .scalar()
        )

    def count_by_day(self, user_id: UUID, start: date, end: date) -> Dict[date, int]:
        """Number of meals per calendar day for start <= day <= end; empty days are absent"""
        rows = (
            self.db.query(Meal.eaten_at)
            .filter(
                Meal.user_id == user_id,
                Meal.eaten_at >= day_bounds(start)[0],
                Meal.eaten_at < day_bounds(end)[1],
            )
            .all()
        )
        return dict(Counter(row.eaten_at.date() for row in rows))

    def sum_macros_for_day(self, user_id: UUID, day: date) -> dict:
        """Sum of macros over a user's meals on one calendar day"""
        start, end = day_bounds(day)
        row = (
            self.db.query(
                func.coalesce(func.sum(Meal.calories), 0.0).label("calories"),
                func.coalesce(func.sum(Meal.protein), 0.0).label("protein"),
                func.coalesce(func.sum(Meal.carbs), 0.0).label("carbs"),
                func.coalesce(func.sum(Meal.fats), 0.0).label("fats"),
                func.count(Meal.meal_id).label("meal_count"),
            )
            .filter(
                Meal.user_id == user_id, Meal.eaten_at >= start, Meal.eaten_at < end
            )
            .one()
        )
        return {
            "calories": float(row.calories),
            "protein": float(row.protein),
            "carbs": float(row.carbs),
            "fats": float(row.fats),
            "meal_count": int(row.meal_count),
        }
