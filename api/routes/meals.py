"""Meal log routes"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_current_user, get_db, get_estimator
from api.responses import DeletedResponse, error_responses
from app.context import UserContext
from domain.enums import MealType
from domain.mappers import MealMapper
from domain.schemas.meal_schemas import MealCreate, MealResponse, MealUpdate
from services.meal_service import MealService
from services.nutrition_estimator import NutritionEstimator

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("fitva.api.meals")


@router.post(
    "",
    response_model=MealResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 404, 502),
)
def create_meal(
    meal: MealCreate,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
    estimator: NutritionEstimator = Depends(get_estimator),
):
    """
    Log a meal and update that day's summary.

    Send the confirmed macros from /nutrition/analyze, or omit them to have
    the description estimated in the same request.
    """
    created = MealService.create_meal(db, ctx, meal, estimator=estimator)
    return MealMapper.to_response(created)


@router.get("", response_model=List[MealResponse], responses=error_responses(401))
def list_meals(
    day: Optional[date] = Query(None, alias="date", description="UTC calendar day"),
    meal_type: Optional[MealType] = Query(None),
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meals = MealService.list_meals(db, ctx, day=day, meal_type=meal_type)
    return [MealMapper.to_response(m) for m in meals]


@router.get("/{meal_id}", response_model=MealResponse, responses=error_responses(401, 404))
def get_meal(
    meal_id: UUID,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return MealMapper.to_response(MealService.get_meal(db, ctx, meal_id))


@router.put(
    "/{meal_id}", response_model=MealResponse, responses=error_responses(400, 401, 404, 409)
)
def update_meal(
    meal_id: UUID,
    patch: MealUpdate,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit a meal. Moving it to another day moves its macros between summaries."""
    return MealMapper.to_response(MealService.update_meal(db, ctx, meal_id, patch))


@router.delete(
    "/{meal_id}", response_model=DeletedResponse, responses=error_responses(401, 404)
)
def delete_meal(
    meal_id: UUID,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    MealService.delete_meal(db, ctx, meal_id)
    return DeletedResponse(deleted=str(meal_id))
