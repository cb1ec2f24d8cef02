"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.meal_repository import MealRepository
from repositories.goal_repository import GoalRepository
from repositories.daily_summary_repository import (
    DailySummaryRepository,
    MacroDelta,
    round_macro,
)
from repositories.nutrition_cache_repository import NutritionCacheRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "MealRepository",
    "GoalRepository",
    "DailySummaryRepository",
    "MacroDelta",
    "round_macro",
    "NutritionCacheRepository",
]
