"""
Schemas for nutrition estimates, daily/weekly summaries and insights.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date

from domain.enums import Confidence, InsightCategory, InsightPriority


class NutritionEstimate(BaseModel):
    """Shape the provider must return for a food description.

    Numbers are strict: a string such as "120" is a schema failure, not a value.
    """

    calories: float = Field(..., ge=0, strict=True)
    protein: float = Field(..., ge=0, strict=True)
    carbs: float = Field(..., ge=0, strict=True)
    fats: float = Field(..., ge=0, strict=True)
    fiber: Optional[float] = Field(None, ge=0, strict=True)
    sugar: Optional[float] = Field(None, ge=0, strict=True)
    sodium: Optional[float] = Field(None, ge=0, strict=True)
    confidence: Confidence
    notes: Optional[str] = None

    @field_validator("confidence", mode="before")
    def normalize_confidence(cls, v):
        return v.lower().strip() if isinstance(v, str) else v


class AnalyzeRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=1000)
    quantity: Optional[str] = Field(None, max_length=200)


class AnalyzeResponse(BaseModel):
    description: str
    quantity: Optional[str]
    estimate: NutritionEstimate
    cached: bool = False


class MacroTotals(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


class DailySummaryResponse(BaseModel):
    date: date
    totals: MacroTotals
    goal_calories: float
    remaining: float = Field(..., description="May be negative when over goal")
    percentage: float = Field(..., ge=0, le=100)
    has_record: bool


class WeeklySummaryResponse(BaseModel):
    start_date: date
    end_date: date
    days: List[DailySummaryResponse]
    totals: MacroTotals
    averages: MacroTotals
    days_logged: int


class Recommendation(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: InsightCategory
    priority: InsightPriority


class RecommendationList(BaseModel):
    """Provider reply for the insights prompt"""

    recommendations: List[Recommendation] = Field(..., min_length=1)


class InsightsResponse(BaseModel):
    status: str = Field(..., description="ok | not_enough_data")
    meal_count: int
    days_analyzed: int = 0
    averages: Optional[MacroTotals] = None
    goal_calories: Optional[float] = None
    recommendations: List[Recommendation] = Field(default_factory=list)
