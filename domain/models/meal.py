"""
Meal log, weight goal and daily summary models.
"""

from sqlalchemy import (
    Column,
    Text,
    DateTime,
    Date,
    Float,
    ForeignKey,
    Index,
    UniqueConstraint,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
import uuid

from domain.models.database import Base, utcnow
from domain.enums import MealType, GoalStatus, Confidence


class Meal(Base):
    """One logged food item with its estimated macros"""

    __tablename__ = "meal"

    meal_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    description = Column(Text, nullable=False)
    quantity = Column(Text)
    meal_type = Column(SQLEnum(MealType), nullable=False)
    eaten_at = Column(DateTime, nullable=False, default=utcnow)

    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fats = Column(Float, nullable=False, default=0)
    fiber = Column(Float)
    sugar = Column(Float)
    sodium = Column(Float)
    confidence = Column(SQLEnum(Confidence))
    raw_response = Column(Text)  # provider reply kept for audit

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("AppUser", back_populates="meals")

    __table_args__ = (Index("ix_meal_user_eaten_at", "user_id", "eaten_at"),)


class Goal(Base):
    """Weight goal set by a user"""

    __tablename__ = "goal"

    goal_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    target_weight_kg = Column(Float, nullable=False)
    current_weight_kg = Column(Float)
    target_date = Column(Date)
    status = Column(SQLEnum(GoalStatus), nullable=False, default=GoalStatus.ACTIVE)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("AppUser", back_populates="goals")


class DailySummary(Base):
    """Running macro totals for one user on one calendar day"""

    __tablename__ = "daily_summary"

    summary_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    summary_date = Column(Date, nullable=False)
    total_calories = Column(Float, nullable=False, default=0)
    total_protein = Column(Float, nullable=False, default=0)
    total_carbs = Column(Float, nullable=False, default=0)
    total_fats = Column(Float, nullable=False, default=0)
    # Snapshot of the user's target when the row was first created
    goal_calories = Column(Float, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("AppUser", back_populates="daily_summaries")

    __table_args__ = (
        UniqueConstraint("user_id", "summary_date", name="uq_daily_summary_user_date"),
    )


class NutritionCacheEntry(Base):
    """Validated estimate keyed on the normalized description and quantity"""

    __tablename__ = "nutrition_cache"

    cache_key = Column(Text, primary_key=True)
    description = Column(Text, nullable=False)
    quantity = Column(Text)
    payload = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
