"""
Insights tests: the minimum-history gate, prompt contents and reply parsing.
"""

import json
from datetime import date, timedelta

import pytest
from sqlalchemy.orm import Session

from app.config import Settings
from app.exceptions import MalformedResponseError, UpstreamError
from domain.enums import InsightCategory, MealType
from services.insights_service import InsightsService, parse_recommendations
from test_fixtures import (
    FakeTextGenerationClient,
    VALID_RECOMMENDATIONS,
    make_ctx,
    make_meal,
    make_user,
)

TODAY = date(2024, 3, 15)


def _log_meals(db, user, count):
    for i in range(count):
        make_meal(
            db,
            user,
            day=TODAY - timedelta(days=i % 3),
            hour=8 + i,
            meal_type=MealType.SNACK if i % 2 else MealType.LUNCH,
        )


def test_four_meals_is_not_enough_and_makes_no_call(db_session: Session):
    user = make_user(db_session)
    _log_meals(db_session, user, 4)
    client = FakeTextGenerationClient(VALID_RECOMMENDATIONS)

    result = InsightsService(client, config=Settings()).generate(
        db_session, make_ctx(user), today=TODAY
    )

    assert result.status == "not_enough_data"
    assert result.meal_count == 4
    assert result.recommendations == []
    assert client.call_count == 0


def test_five_meals_generates_recommendations(db_session: Session):
    """
    Five meals across three days unlock insights.

    Verifies:
    - exactly one provider call
    - averages are over days with meals
    - the prompt carries the goal and the meal-type breakdown
    """
    user = make_user(db_session)
    _log_meals(db_session, user, 5)
    client = FakeTextGenerationClient(VALID_RECOMMENDATIONS)

    result = InsightsService(client, config=Settings()).generate(
        db_session, make_ctx(user), today=TODAY
    )

    assert result.status == "ok"
    assert result.meal_count == 5
    assert result.days_analyzed == 3
    assert result.averages.calories == pytest.approx(5 * 500 / 3)
    assert len(result.recommendations) == 3
    assert result.recommendations[0].category == InsightCategory.MACROS
    assert client.call_count == 1
    prompt = client.calls[0]["user"]
    assert f"Daily calorie goal: {user.target_calories} kcal" in prompt
    assert "lunch=3" in prompt and "snack=2" in prompt


def test_threshold_is_configurable(db_session: Session):
    user = make_user(db_session)
    _log_meals(db_session, user, 2)
    client = FakeTextGenerationClient(VALID_RECOMMENDATIONS)

    result = InsightsService(client, config=Settings(insights_min_meals=2)).generate(
        db_session, make_ctx(user), today=TODAY
    )
    assert result.status == "ok"


def test_invalid_reply_is_malformed_and_not_retried(db_session: Session):
    user = make_user(db_session)
    _log_meals(db_session, user, 5)
    client = FakeTextGenerationClient("I think you should eat more greens.", VALID_RECOMMENDATIONS)

    with pytest.raises(MalformedResponseError):
        InsightsService(client, config=Settings()).generate(
            db_session, make_ctx(user), today=TODAY
        )
    assert client.call_count == 1


def test_upstream_failure_propagates(db_session: Session):
    user = make_user(db_session)
    _log_meals(db_session, user, 5)
    client = FakeTextGenerationClient(UpstreamError(details={"reason": "rate limited"}))

    with pytest.raises(UpstreamError):
        InsightsService(client, config=Settings()).generate(
            db_session, make_ctx(user), today=TODAY
        )


@pytest.mark.parametrize(
    "payload",
    [
        {"recommendations": []},
        {"recommendations": [{"title": "x", "description": "y", "category": "sleep", "priority": "high"}]},
        {"advice": "eat less"},
        [],
    ],
)
def test_parse_recommendations_rejects_invalid_shapes(payload):
    with pytest.raises(MalformedResponseError):
        parse_recommendations(json.dumps(payload))


def test_parse_recommendations_truncates_to_five():
    item = VALID_RECOMMENDATIONS["recommendations"][0]
    parsed = parse_recommendations(json.dumps({"recommendations": [item] * 7}))
    assert len(parsed.recommendations) == 5
