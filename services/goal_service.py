from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.context import UserContext
from app.exceptions import NotFoundError
from domain.enums import GoalStatus
from domain.models import Goal
from domain.schemas.goal_schemas import GoalCreate, GoalUpdate
from repositories import GoalRepository
from services.profile_service import ProfileService

logger = logging.getLogger("fitva.goals")


class GoalService:
    """Weight goals. Status moves freely between active, completed and paused."""

    @staticmethod
    def _get_owned(db: Session, ctx: UserContext, goal_id: UUID) -> Goal:
        goal = GoalRepository(db).get_for_user(ctx.user_id, goal_id)
        if not goal:
            raise NotFoundError(f"Goal {goal_id} not found")
        return goal

    @staticmethod
    def create_goal(db: Session, ctx: UserContext, data: GoalCreate) -> Goal:
        user = ProfileService.require_user(db, ctx)
        current = data.current_weight_kg or user.weight_kg
        goal = GoalRepository(db).create(
            Goal(
                user_id=user.user_id,
                target_weight_kg=data.target_weight_kg,
                current_weight_kg=current,
                target_date=data.target_date,
                status=GoalStatus.ACTIVE,
            )
        )
        logger.info(
            f"goal_created user_id={ctx.user_id} goal_id={goal.goal_id} "
            f"target_weight_kg={goal.target_weight_kg}"
        )
        return goal

    @staticmethod
    def list_goals(
        db: Session, ctx: UserContext, status: Optional[GoalStatus] = None
    ) -> List[Goal]:
        ProfileService.require_user(db, ctx)
        return GoalRepository(db).list_by_user(ctx.user_id, status=status)

    @staticmethod
    def update_goal(
        db: Session, ctx: UserContext, goal_id: UUID, data: GoalUpdate
    ) -> Goal:
        """Partial update; fields sent as null are ignored"""
        goal = GoalService._get_owned(db, ctx, goal_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        previous_status = goal.status

        for field, value in changes.items():
            setattr(goal, field, value)
        goal = GoalRepository(db).update(goal)

        logger.info(
            f"goal_updated user_id={ctx.user_id} goal_id={goal_id} "
            f"fields={sorted(changes)} status={previous_status.value}->{goal.status.value}"
        )
        return goal

    @staticmethod
    def delete_goal(db: Session, ctx: UserContext, goal_id: UUID) -> None:
        goal = GoalService._get_owned(db, ctx, goal_id)
        GoalRepository(db).delete(goal)
        logger.info(f"goal_deleted user_id={ctx.user_id} goal_id={goal_id}")
