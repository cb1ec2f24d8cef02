"""
Goal Repository - Data access layer for weight goals
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Goal
from domain.enums import GoalStatus


class GoalRepository(BaseRepository[Goal]):
    """Repository for goal data access"""

    def __init__(self, db: Session):
        super().__init__(db, Goal)

    def get_by_id(self, goal_id: UUID) -> Optional[Goal]:
        """Get goal by ID"""
        return self.db.query(Goal).filter(Goal.goal_id == goal_id).first()

    def get_for_user(self, user_id: UUID, goal_id: UUID) -> Optional[Goal]:
        """Get a goal only if it belongs to the given user"""
        return (
            self.db.query(Goal)
            .filter(Goal.goal_id == goal_id, Goal.user_id == user_id)
            .first()
        )

    def list_by_user(
        self, user_id: UUID, status: Optional[GoalStatus] = None
    ) -> List[Goal]:
        """List a user's goals, newest first"""
        query = self.db.query(Goal).filter(Goal.user_id == user_id)
        if status is not None:
            query = query.filter(Goal.status == status)
        return query.order_by(Goal.created_at.desc()).all()
