"""
Personalized recommendations from recent eating history.

Insights are only generated once the user has logged enough meals; below
that threshold no provider call is made and ``not_enough_data`` is returned.
"""

from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Optional
import json
import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session

from adapters.llm_adapter import TextGenerationClient
from app.config import Settings, settings as default_settings
from app.context import UserContext
from app.exceptions import MalformedResponseError
from domain.models import utcnow
from domain.schemas.nutrition_schemas import (
    InsightsResponse,
    MacroTotals,
    RecommendationList,
)
from repositories import MealRepository
from services.daily_summary_service import DailySummaryService
from services.nutrition_estimator import strip_code_fence
from services.profile_service import ProfileService

logger = logging.getLogger("fitva.insights")

MAX_RECOMMENDATIONS = 5

INSIGHTS_SYSTEM_PROMPT = (
    "You are a registered dietitian. You give short, practical and specific "
    "advice based on a person's recent food log. Always answer with a single "
    "JSON object and nothing else."
)

INSIGHTS_PROMPT = """Here is a summary of my eating over the last {days} days.

Daily calorie goal: {goal_calories} kcal
Days with logged meals: {days_logged}
Average per logged day:
- calories: {calories} kcal
- protein: {protein} g
- carbs: {carbs} g
- fats: {fats} g
Meals by type: {meal_types}
Average meals per logged day: {meals_per_day}

Give me 3 to 5 recommendations. Respond with a JSON object of the form
{{"recommendations": [{{"title": str, "description": str,
"category": "calories" | "macros" | "timing" | "variety",
"priority": "high" | "medium" | "low"}}]}}"""


def parse_recommendations(content: Optional[str]) -> RecommendationList:
    """
    Parse the provider reply for the insights prompt.

    Raises:
        MalformedResponseError: Empty text, invalid JSON or a schema violation
    """
    if not content or not content.strip():
        raise MalformedResponseError(details={"reason": "empty response"})
    try:
        data = json.loads(strip_code_fence(content))
    except ValueError as exc:
        raise MalformedResponseError(details={"reason": f"invalid JSON: {exc}"}) from exc
    try:
        parsed = RecommendationList.model_validate(data)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise MalformedResponseError(
            details={"reason": "schema validation failed", "fields": fields}
        ) from exc
    parsed.recommendations = parsed.recommendations[:MAX_RECOMMENDATIONS]
    return parsed


class InsightsService:
    """Build the insights prompt from summaries and meals, and parse the reply"""

    def __init__(self, client: TextGenerationClient, config: Optional[Settings] = None):
        self.client = client
        self.config = config or default_settings

    def generate(
        self, db: Session, ctx: UserContext, today: Optional[date] = None
    ) -> InsightsResponse:
        """
        Generate recommendations for the caller.

        Provider failures are raised as UpstreamError or MalformedResponseError
        and are not retried here.
        """
        user = ProfileService.require_user(db, ctx)
        meals = MealRepository(db)
        meal_count = meals.count_by_user(user.user_id)

        if meal_count < self.config.insights_min_meals:
            logger.info(
                f"insights_not_enough_data user_id={ctx.user_id} meals={meal_count} "
                f"required={self.config.insights_min_meals}"
            )
            return InsightsResponse(status="not_enough_data", meal_count=meal_count)

        days = self.config.insights_window_days
        end_date = today or utcnow().date()
        weekly = DailySummaryService.get_weekly_summary(db, ctx, end_date, days=days)
        window_meals = meals.list_by_user(
            user.user_id,
            start=datetime.combine(weekly.start_date, time.min),
            end=datetime.combine(end_date + timedelta(days=1), time.min),
        )
        by_type = Counter(m.meal_type.value for m in window_meals)
        goal_calories = DailySummaryService.current_goal(user)

        prompt = INSIGHTS_PROMPT.format(
            days=days,
            goal_calories=round(goal_calories),
            days_logged=weekly.days_logged,
            calories=round(weekly.averages.calories),
            protein=round(weekly.averages.protein, 1),
            carbs=round(weekly.averages.carbs, 1),
            fats=round(weekly.averages.fats, 1),
            meal_types=", ".join(f"{k}={v}" for k, v in sorted(by_type.items())) or "none",
            meals_per_day=round(len(window_meals) / (weekly.days_logged or 1), 1),
        )

        content = self.client.complete_json(INSIGHTS_SYSTEM_PROMPT, prompt)
        parsed = parse_recommendations(content)

        logger.info(
            f"insights_generated user_id={ctx.user_id} meals={meal_count} "
            f"days_logged={weekly.days_logged} recommendations={len(parsed.recommendations)}"
        )
        return InsightsResponse(
            status="ok",
            meal_count=meal_count,
            days_analyzed=weekly.days_logged,
            averages=MacroTotals(**weekly.averages.model_dump()),
            goal_calories=goal_calories,
            recommendations=parsed.recommendations,
        )
