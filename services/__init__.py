"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.daily_summary_service import DailySummaryService
from services.meal_service import MealService
from services.goal_service import GoalService
from services.nutrition_estimator import (
    EstimationResult,
    EstimationStatus,
    NutritionEstimator,
)
from services.insights_service import InsightsService

# Note: tdee_calculator contains pure functions, not a class

__all__ = [
    "ProfileService",
    "DailySummaryService",
    "MealService",
    "GoalService",
    "EstimationResult",
    "EstimationStatus",
    "NutritionEstimator",
    "InsightsService",
]
