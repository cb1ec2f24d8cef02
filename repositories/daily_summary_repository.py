"""
Daily Summary Repository - Data access layer for per-day running totals

Totals are changed with a single atomic upsert so two meals logged at the
same time for the same (user, date) cannot lose an increment. Meal macros,
deltas and the incremented totals are all rounded to MACRO_PRECISION places,
so a day's totals stay equal to the rounded sum of its meals.
"""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID
from datetime import date
import logging
import uuid

from sqlalchemy.orm import Session
from sqlalchemy import Float, Numeric, cast, func, update
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import DailySummary, utcnow

logger = logging.getLogger("fitva.repositories.daily_summary")

MACRO_PRECISION = 2

_TOTAL_COLUMNS = ("total_calories", "total_protein", "total_carbs", "total_fats")


def round_macro(value) -> float:
    """Round a macro amount to the stored precision (-0.0 becomes 0.0)"""
    return round(float(value or 0.0), MACRO_PRECISION) + 0.0


def _rounded_sum(column, amount):
    # Postgres has round(numeric, int) only
    return cast(func.round(cast(column + amount, Numeric), MACRO_PRECISION), Float)


@dataclass(frozen=True)
class MacroDelta:
    """Signed change to a day's totals, rounded to MACRO_PRECISION"""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0

    def __post_init__(self):
        for name in ("calories", "protein", "carbs", "fats"):
            object.__setattr__(self, name, round_macro(getattr(self, name)))

    @classmethod
    def of(cls, source) -> "MacroDelta":
        """Delta that adds the macros of a meal-like object"""
        return cls(
            calories=source.calories,
            protein=source.protein,
            carbs=source.carbs,
            fats=source.fats,
        )

    def __neg__(self) -> "MacroDelta":
        return MacroDelta(-self.calories, -self.protein, -self.carbs, -self.fats)

    def __sub__(self, other: "MacroDelta") -> "MacroDelta":
        return MacroDelta(
            self.calories - other.calories,
            self.protein - other.protein,
            self.carbs - other.carbs,
            self.fats - other.fats,
        )

    def is_zero(self) -> bool:
        return not (self.calories or self.protein or self.carbs or self.fats)

    def as_columns(self) -> dict:
        return dict(zip(_TOTAL_COLUMNS, (self.calories, self.protein, self.carbs, self.fats)))


def _dialect_insert(dialect_name: str):
    """INSERT construct supporting ON CONFLICT for the current backend, if any"""
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        return None
    return insert


class DailySummaryRepository(BaseRepository[DailySummary]):
    """Repository for daily summary data access"""

    def __init__(self, db: Session):
        super().__init__(db, DailySummary)

    def get_by_id(self, summary_id: UUID) -> Optional[DailySummary]:
        """Get summary by ID"""
        return (
            self.db.query(DailySummary)
            .filter(DailySummary.summary_id == summary_id)
            .first()
        )

    def get_for_date(self, user_id: UUID, day: date) -> Optional[DailySummary]:
        """Get the summary row for (user, date), reloading any cached instance"""
        return (
            self.db.query(DailySummary)
            .filter(DailySummary.user_id == user_id, DailySummary.summary_date == day)
            .populate_existing()
            .first()
        )

    def get_range(self, user_id: UUID, start: date, end: date) -> List[DailySummary]:
        """Summaries with start <= date <= end, oldest first"""
        return (
            self.db.query(DailySummary)
            .filter(
                DailySummary.user_id == user_id,
                DailySummary.summary_date >= start,
                DailySummary.summary_date <= end,
            )
            .populate_existing()
            .order_by(DailySummary.summary_date)
            .all()
        )

    def apply_delta(
        self,
        user_id: UUID,
        day: date,
        delta: MacroDelta,
        goal_calories: float,
        commit: bool = True,
    ) -> None:
        """
        Add a (possibly negative) delta to the totals of (user, day).

        A missing row is created with the delta as its totals and
        ``goal_calories`` as its goal. An existing row keeps its stored goal.

        Args:
            user_id: Owner of the summary
            day: Calendar date of the affected meals
            delta: Signed change to the four totals
            goal_calories: Goal used only when the row is created
            commit: Commit immediately, or leave it to the caller's unit of work
        """
        insert = _dialect_insert(self.db.get_bind().dialect.name)
        if insert is not None:
            self._upsert(insert, user_id, day, delta, goal_calories)
        else:
            self._update_then_insert(user_id, day, delta, goal_calories)

        logger.debug(
            f"summary_delta user_id={user_id} date={day} "
            f"calories={delta.calories:+} protein={delta.protein:+} "
            f"carbs={delta.carbs:+} fats={delta.fats:+}"
        )
        if commit:
            self.db.commit()

    def _upsert(self, insert, user_id, day, delta, goal_calories) -> None:
        now = utcnow()
        stmt = insert(DailySummary).values(
            summary_id=uuid.uuid4(),
            user_id=user_id,
            summary_date=day,
            goal_calories=goal_calories,
            created_at=now,
            updated_at=now,
            **delta.as_columns(),
        )
        increments = {
            column: _rounded_sum(getattr(DailySummary, column), getattr(stmt.excluded, column))
            for column in _TOTAL_COLUMNS
        }
        increments["updated_at"] = stmt.excluded.updated_at
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "summary_date"],
            set_=increments,
        )
        self.db.execute(stmt)

    def _increment(self, user_id, day, delta) -> int:
        stmt = (
            update(DailySummary)
            .where(DailySummary.user_id == user_id, DailySummary.summary_date == day)
            .values(
                updated_at=utcnow(),
                **{
                    column: _rounded_sum(getattr(DailySummary, column), amount)
                    for column, amount in delta.as_columns().items()
                },
            )
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def _update_then_insert(self, user_id, day, delta, goal_calories) -> None:
        if self._increment(user_id, day, delta):
            return
        try:
            with self.db.begin_nested():
                self.db.add(
                    DailySummary(
                        user_id=user_id,
                        summary_date=day,
                        goal_calories=goal_calories,
                        **delta.as_columns(),
                    )
                )
        except IntegrityError:
            # another writer created the row between our UPDATE and INSERT
            self._increment(user_id, day, delta)

    def replace_totals(
        self, user_id: UUID, day: date, totals: MacroDelta, goal_calories: float, commit: bool = True
    ) -> DailySummary:
        """Overwrite the totals of (user, day), creating the row if needed"""
        summary = self.get_for_date(user_id, day)
        if summary is None:
            summary = DailySummary(
                user_id=user_id, summary_date=day, goal_calories=goal_calories
            )
            self.db.add(summary)
        for column, value in totals.as_columns().items():
            setattr(summary, column, value)
        if commit:
            self.db.commit()
            self.db.refresh(summary)
        else:
            self.db.flush()
        return summary
