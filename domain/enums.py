"""
Domain enums for the Fitva application.
Contains all enumeration types used across the domain models.
"""

import enum


class GoalType(str, enum.Enum):
    """Weight goal driving the calorie target offset"""

    LOSE = "lose"
    GAIN = "gain"
    MAINTAIN = "maintain"


class ActivityLevel(str, enum.Enum):
    """Physical activity levels"""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class MealType(str, enum.Enum):
    """Meal slot tag"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class GoalStatus(str, enum.Enum):
    """Lifecycle of a weight goal; transitions are user-driven"""

    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class Confidence(str, enum.Enum):
    """How sure the provider is about an estimate"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightCategory(str, enum.Enum):
    CALORIES = "calories"
    MACROS = "macros"
    TIMING = "timing"
    VARIETY = "variety"


class InsightPriority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
