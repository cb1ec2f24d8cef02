"""
Daily summary mappers.
Derives remaining calories and goal percentage from stored totals.
"""

from datetime import date
from typing import Optional

from domain.models import DailySummary
from domain.schemas.nutrition_schemas import DailySummaryResponse, MacroTotals


class SummaryMapper:
    """Mapper for daily summary transformations."""

    @staticmethod
    def percentage(total_calories: float, goal_calories: float) -> float:
        """Share of the goal eaten, clamped to [0, 100] for display."""
        if goal_calories <= 0:
            return 0.0
        return max(0.0, min(100.0, total_calories / goal_calories * 100))

    @staticmethod
    def to_response(
        day: date, summary: Optional[DailySummary], fallback_goal: float
    ) -> DailySummaryResponse:
        """
        Build the dashboard view of one day.

        A missing row yields zeroed totals against the user's current goal.
        """
        if summary is None:
            totals = MacroTotals()
            goal = float(fallback_goal)
        else:
            totals = MacroTotals(
                calories=summary.total_calories,
                protein=summary.total_protein,
                carbs=summary.total_carbs,
                fats=summary.total_fats,
            )
            goal = float(summary.goal_calories)

        return DailySummaryResponse(
            date=day,
            totals=totals,
            goal_calories=goal,
            remaining=goal - totals.calories,
            percentage=SummaryMapper.percentage(totals.calories, goal),
            has_record=summary is not None,
        )
