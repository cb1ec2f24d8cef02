"""
Energy expenditure calculator.

Pure functions: Mifflin-St Jeor BMR, activity-scaled TDEE and a
goal-adjusted daily calorie target. Invalid numbers are rejected with
ServiceValidationError rather than clamped.
"""

from dataclasses import dataclass
import math

from app.exceptions import ServiceValidationError

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.375

GOAL_OFFSETS = {
    "lose": -500,
    "gain": 500,
    "maintain": 0,
}

MALE_CODES = {"male", "m", "man"}


@dataclass(frozen=True)
class TDEEResult:
    bmr: float
    tdee: int
    target_calories: int


def _key(value) -> str:
    """Lookup key for enum members or raw strings"""
    raw = getattr(value, "value", value)
    return str(raw).strip().lower() if raw is not None else ""


def _require_number(name: str, value, allow_zero: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ServiceValidationError(f"{name} must be a number", details={name: value})
    if not math.isfinite(value):
        raise ServiceValidationError(f"{name} must be finite", details={name: value})
    if value < 0 or (value == 0 and not allow_zero):
        raise ServiceValidationError(
            f"{name} must be {'non-negative' if allow_zero else 'positive'}",
            details={name: value},
        )
    return float(value)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_bmr(weight_kg: float, height_cm: float, age: float, gender: str) -> float:
    """Basal metabolic rate in kcal/day (Mifflin-St Jeor), not rounded."""
    weight = _require_number("weight_kg", weight_kg)
    height = _require_number("height_cm", height_cm)
    years = _require_number("age", age, allow_zero=True)
    constant = 5 if _key(gender) in MALE_CODES else -161
    return 10 * weight + 6.25 * height - 5 * years + constant


def compute_tdee(bmr: float, activity_level) -> int:
    """BMR scaled by the activity multiplier; unknown levels use 1.375."""
    bmr = _require_number("bmr", bmr, allow_zero=True)
    multiplier = ACTIVITY_MULTIPLIERS.get(_key(activity_level), DEFAULT_ACTIVITY_MULTIPLIER)
    return round_half_up(bmr * multiplier)


def compute_target_calories(tdee: float, goal) -> int:
    """TDEE plus the goal offset; unknown goals apply no offset."""
    tdee = _require_number("tdee", tdee, allow_zero=True)
    return round_half_up(tdee + GOAL_OFFSETS.get(_key(goal), 0))


def calculate_targets(
    weight_kg: float, height_cm: float, age: float, gender: str, activity_level, goal
) -> TDEEResult:
    bmr = compute_bmr(weight_kg, height_cm, age, gender)
    tdee = compute_tdee(bmr, activity_level)
    return TDEEResult(bmr=bmr, tdee=tdee, target_calories=compute_target_calories(tdee, goal))
