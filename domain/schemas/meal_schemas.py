from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Any, Dict
from datetime import datetime
from uuid import UUID

from domain.enums import MealType, Confidence


def clean_description(v: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; a blank description is rejected"""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("description must not be blank")
    return v


class MealCreate(BaseModel):
    """Create a meal from a confirmed estimate.

    When calories/protein/carbs/fats are omitted the service estimates them
    from the description first.
    """

    description: str = Field(..., min_length=1, max_length=1000)
    quantity: Optional[str] = Field(None, max_length=200)
    meal_type: MealType
    eaten_at: Optional[datetime] = None
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0)
    confidence: Optional[Confidence] = None
    raw_response: Optional[Dict[str, Any]] = Field(
        None, description="Provider reply the client confirmed, kept for audit"
    )

    @field_validator("description")
    def strip_description(cls, v):
        return clean_description(v)

    @model_validator(mode="after")
    def macros_all_or_nothing(self):
        core = [self.calories, self.protein, self.carbs, self.fats]
        if any(v is not None for v in core) and any(v is None for v in core):
            raise ValueError(
                "calories, protein, carbs and fats must be given together or not at all"
            )
        return self

    @property
    def has_macros(self) -> bool:
        return self.calories is not None


class MealUpdate(BaseModel):
    """Partial meal edit; omitted fields are left untouched"""

    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    quantity: Optional[str] = Field(None, max_length=200)
    meal_type: Optional[MealType] = None
    eaten_at: Optional[datetime] = None
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)
    fiber: Optional[float] = Field(None, ge=0)
    sugar: Optional[float] = Field(None, ge=0)
    sodium: Optional[float] = Field(None, ge=0)
    confidence: Optional[Confidence] = None
    client_updated_at: Optional[datetime] = Field(
        None,
        description="When the client last saw the meal; older than the stored edit means stale",
    )

    @field_validator("description")
    def strip_description(cls, v):
        return clean_description(v)


class MealResponse(BaseModel):
    meal_id: UUID
    user_id: UUID
    description: str
    quantity: Optional[str]
    meal_type: MealType
    eaten_at: datetime
    calories: float
    protein: float
    carbs: float
    fats: float
    fiber: Optional[float]
    sugar: Optional[float]
    sodium: Optional[float]
    confidence: Optional[Confidence]
    raw_response: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
