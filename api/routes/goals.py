"""Weight goal routes"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from api.dependencies import get_current_user, get_db
from api.responses import DeletedResponse, error_responses
from app.context import UserContext
from domain.enums import GoalStatus
from domain.schemas.goal_schemas import GoalCreate, GoalResponse, GoalUpdate
from services.goal_service import GoalService

router = APIRouter(prefix="/goals", tags=["Goals"])


@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(401, 404),
)
def create_goal(
    goal: GoalCreate,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return GoalService.create_goal(db, ctx, goal)


@router.get("", response_model=List[GoalResponse], responses=error_responses(401, 404))
def list_goals(
    goal_status: Optional[GoalStatus] = Query(None, alias="status"),
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return GoalService.list_goals(db, ctx, status=goal_status)


@router.put("/{goal_id}", response_model=GoalResponse, responses=error_responses(401, 404))
def update_goal(
    goal_id: UUID,
    goal: GoalUpdate,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return GoalService.update_goal(db, ctx, goal_id, goal)


@router.delete(
    "/{goal_id}", response_model=DeletedResponse, responses=error_responses(401, 404)
)
def delete_goal(
    goal_id: UUID,
    ctx: UserContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    GoalService.delete_goal(db, ctx, goal_id)
    return DeletedResponse(deleted=str(goal_id))
