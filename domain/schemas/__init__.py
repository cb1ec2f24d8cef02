"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.profile_schemas import (
    UserCreate,
    ProfileUpdateRequest,
    UserProfileResponse,
    TDEERequest,
    TDEEResponse,
)
from domain.schemas.meal_schemas import MealCreate, MealUpdate, MealResponse
from domain.schemas.goal_schemas import GoalCreate, GoalUpdate, GoalResponse
from domain.schemas.nutrition_schemas import (
    NutritionEstimate,
    AnalyzeRequest,
    AnalyzeResponse,
    MacroTotals,
    DailySummaryResponse,
    WeeklySummaryResponse,
    Recommendation,
    RecommendationList,
    InsightsResponse,
)

__all__ = [
    # Profile schemas
    "UserCreate",
    "ProfileUpdateRequest",
    "UserProfileResponse",
    "TDEERequest",
    "TDEEResponse",
    # Meal schemas
    "MealCreate",
    "MealUpdate",
    "MealResponse",
    # Goal schemas
    "GoalCreate",
    "GoalUpdate",
    "GoalResponse",
    # Nutrition schemas
    "NutritionEstimate",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "MacroTotals",
    "DailySummaryResponse",
    "WeeklySummaryResponse",
    "Recommendation",
    "RecommendationList",
    "InsightsResponse",
]
