"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
    utcnow,
)
from domain.models.user import AppUser
from domain.models.meal import Meal, Goal, DailySummary, NutritionCacheEntry

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    "utcnow",
    # User models
    "AppUser",
    # Meal log models
    "Meal",
    "Goal",
    "DailySummary",
    "NutritionCacheEntry",
]
