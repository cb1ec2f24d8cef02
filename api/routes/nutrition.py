"""Nutrition analysis, summaries, insights and the TDEE calculator"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
import logging

from api.dependencies import (
    get_current_user,
    get_db,
    get_estimator,
    get_insights_service,
)
from api.responses import error_responses
from app.context import UserContext
from domain.models import utcnow
from domain.schemas.nutrition_schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    DailySummaryResponse,
    InsightsResponse,
    WeeklySummaryResponse,
)
from domain.schemas.profile_schemas import TDEERequest, TDEEResponse
from services.daily_summary_service import DailySummaryService
from services.insights_service import InsightsService
from services.nutrition_estimator import NutritionEstimator
from services.tdee_calculator import calculate_targets

router = APIRouter(prefix="/nutrition", tags=["Nutrition"])
logger = logging.getLogger("fitva.api.nutrition")


@router.post(
    "/analyze", response_model=AnalyzeResponse, responses=error_responses(400, 401, 502)
)
def analyze(
    request: AnalyzeRequest,
    ctx: UserContext = Depends(get_current_user),
    estimator: NutritionEstimator = Depends(get_estimator),
):
    """
    Estimate macros for a food description without saving anything.

    The client shows the estimate, lets the user confirm it and then posts it
    to /meals.
    """
    result = estimator.estimate(request.description, request.quantity)
    estimate = result.unwrap()
    logger.info(
        f"analyze_completed user_id={ctx.user_id} cached={result.cached} "
        f"attempts={result.attempts}"
    )
    return AnalyzeResponse(
        description=request.description.strip(),
        quantity=request.quantity,
        estimate=estimate,
        cached=result.cached,
    )


@router.get("/daily", response_model=DailySummaryResponse, responses=error_responses(401, 404))
def daily_summary(
    day: Optional[date] = Query(None, alias="date", description="UTC day, defaults to today"),
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DailySummaryService.get_summary(db, ctx, day or utcnow().date())


@router.get(
    "/weekly", response_model=WeeklySummaryResponse, responses=error_responses(401, 404)
)
def weekly_summary(
    end_date: Optional[date] = Query(None, description="Last day of the window, defaults to today"),
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DailySummaryService.get_weekly_summary(db, ctx, end_date or utcnow().date())


@router.get(
    "/insights", response_model=InsightsResponse, responses=error_responses(401, 404, 502)
)
def insights(
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: InsightsService = Depends(get_insights_service),
):
    """Recommendations from the last week, once enough meals are logged"""
    return service.generate(db, ctx)


@router.post("/tdee", response_model=TDEEResponse, responses=error_responses(400))
def tdee(request: TDEERequest):
    """Stateless BMR / TDEE / target calculator"""
    result = calculate_targets(
        weight_kg=request.weight_kg,
        height_cm=request.height_cm,
        age=request.age,
        gender=request.gender,
        activity_level=request.activity_level,
        goal=request.goal,
    )
    return TDEEResponse(bmr=result.bmr, tdee=result.tdee, target_calories=result.target_calories)
