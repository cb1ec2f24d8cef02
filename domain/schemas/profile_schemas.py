from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from domain.enums import GoalType, ActivityLevel


class BiometricsFields(BaseModel):
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[str] = Field(None, min_length=1, max_length=20)
    height_cm: Optional[float] = Field(None, gt=0, le=300)
    weight_kg: Optional[float] = Field(None, gt=0, le=700)

    @field_validator("gender")
    def normalize_gender(cls, v):
        return v.lower().strip() if v is not None else v


class UserCreate(BiometricsFields):
    email: EmailStr
    full_name: Optional[str] = Field(None, max_length=200)
    activity_level: ActivityLevel = ActivityLevel.LIGHT
    goal: GoalType = GoalType.MAINTAIN


class ProfileUpdateRequest(BiometricsFields):
    """Partial profile update; omitted fields are left untouched"""

    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    activity_level: Optional[ActivityLevel] = None
    goal: Optional[GoalType] = None


class UserProfileResponse(BaseModel):
    user_id: UUID
    email: str
    full_name: Optional[str]
    age: Optional[int]
    gender: Optional[str]
    height_cm: Optional[float]
    weight_kg: Optional[float]
    activity_level: ActivityLevel
    goal: GoalType
    target_calories: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TDEERequest(BaseModel):
    weight_kg: float = Field(..., gt=0, le=700)
    height_cm: float = Field(..., gt=0, le=300)
    age: int = Field(..., ge=1, le=120)
    gender: str = Field(..., min_length=1, max_length=20)
    activity_level: str = Field("light", description="Unknown levels use the 'light' multiplier")
    goal: str = Field("maintain", description="Unknown goals apply no offset")


class TDEEResponse(BaseModel):
    bmr: float
    tdee: int
    target_calories: int
