from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from uuid import UUID

from domain.enums import GoalStatus


class GoalCreate(BaseModel):
    target_weight_kg: float = Field(..., gt=0, le=700)
    current_weight_kg: Optional[float] = Field(None, gt=0, le=700)
    target_date: Optional[date] = None


class GoalUpdate(BaseModel):
    target_weight_kg: Optional[float] = Field(None, gt=0, le=700)
    current_weight_kg: Optional[float] = Field(None, gt=0, le=700)
    target_date: Optional[date] = None
    status: Optional[GoalStatus] = None


class GoalResponse(BaseModel):
    goal_id: UUID
    user_id: UUID
    target_weight_kg: float
    current_weight_kg: Optional[float]
    target_date: Optional[date]
    status: GoalStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
