"""
User-related database models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    Integer,
    Float,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow
from domain.enums import GoalType, ActivityLevel


class AppUser(Base):
    """User account with biometrics and the derived calorie target"""

    __tablename__ = "app_user"

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False)
    full_name = Column(Text)

    # Biometrics
    age = Column(Integer)
    gender = Column(Text)
    height_cm = Column(Float)
    weight_kg = Column(Float)
    activity_level = Column(
        SQLEnum(ActivityLevel), nullable=False, default=ActivityLevel.LIGHT
    )
    goal = Column(SQLEnum(GoalType), nullable=False, default=GoalType.MAINTAIN)
    target_calories = Column(Integer)  # recomputed by ProfileService

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    meals = relationship(
        "Meal", back_populates="user", cascade="all, delete-orphan"
    )
    goals = relationship(
        "Goal", back_populates="user", cascade="all, delete-orphan"
    )
    daily_summaries = relationship(
        "DailySummary",
        back_populates="user",
        cascade="all, delete-orphan",
    )
