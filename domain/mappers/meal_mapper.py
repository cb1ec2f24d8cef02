"""
Meal domain mappers.
Handles transformation between ORM models and DTOs for meal-related entities.
"""

import json
import logging
from typing import Optional, Any, Dict

from domain.models import Meal
from domain.schemas.meal_schemas import MealResponse

logger = logging.getLogger("fitva.mappers.meal")


class MealMapper:
    """Mapper for meal transformations."""

    @staticmethod
    def encode_raw(raw: Optional[Any]) -> Optional[str]:
        """Serialize a provider reply for the audit column; strings are kept verbatim."""
        if raw is None:
            return None
        if isinstance(raw, str):
            return raw
        return json.dumps(raw, sort_keys=True)

    @staticmethod
    def decode_raw(raw: Optional[str]) -> Optional[Dict[str, Any]]:
        if not raw:
            return None
        try:
            decoded = json.loads(raw)
        except ValueError:
            # audit text that was never JSON; expose it as-is
            return {"text": raw}
        return decoded if isinstance(decoded, dict) else {"value": decoded}

    @staticmethod
    def to_response(meal: Meal) -> MealResponse:
        """
        Convert Meal ORM model to MealResponse DTO.

        Args:
            meal: Meal ORM instance

        Returns:
            MealResponse DTO with the raw provider reply decoded
        """
        return MealResponse(
            meal_id=meal.meal_id,
            user_id=meal.user_id,
            description=meal.description,
            quantity=meal.quantity,
            meal_type=meal.meal_type,
            eaten_at=meal.eaten_at,
            calories=meal.calories,
            protein=meal.protein,
            carbs=meal.carbs,
            fats=meal.fats,
            fiber=meal.fiber,
            sugar=meal.sugar,
            sodium=meal.sodium,
            confidence=meal.confidence,
            raw_response=MealMapper.decode_raw(meal.raw_response),
            created_at=meal.created_at,
            updated_at=meal.updated_at,
        )
