"""
HTTP endpoint tests through FastAPI's TestClient.

Every request runs against the in-memory database and the scripted provider
from test_fixtures. Error responses are checked for the common envelope:
{"success": false, "error": {"code", "message", ...}, "timestamp"}.
"""

import uuid

from test_fixtures import (
    VALID_ESTIMATE,
    auth_headers,
    unique_email,
)
from app.exceptions import UpstreamError


def _register(client, **fields) -> dict:
    payload = {
        "email": unique_email("sarah.martinez"),
        "full_name": "Sarah Martinez",
        "age": 30,
        "gender": "female",
        "height_cm": 165,
        "weight_kg": 60,
        "activity_level": "sedentary",
        "goal": "maintain",
    }
    payload.update(fields)
    r = client.post("/users", json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def _meal_payload(**fields) -> dict:
    payload = {
        "description": "Chicken rice bowl",
        "meal_type": "lunch",
        "eaten_at": "2024-03-15T12:00:00",
        "calories": 500,
        "protein": 30,
        "carbs": 50,
        "fats": 20,
    }
    payload.update(fields)
    return payload


def assert_error(response, status_code: int, code: str) -> dict:
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    assert body["error"]["message"]
    assert "timestamp" in body
    return body["error"]


# =============================================================================
# HEALTH AND IDENTITY
# =============================================================================


def test_health_check(client):
    r = client.get("/health-check")
    assert r.status_code == 200
    body = r.json()
    assert body["service"] == "Fitva"
    assert body["database"] == "ok"
    assert r.headers.get("X-Request-ID")
    assert r.headers.get("X-Process-Time")


def test_missing_user_header_is_unauthorized(client):
    assert_error(client.get("/users/me"), 401, "UNAUTHORIZED")


def test_malformed_user_header_is_unauthorized(client):
    r = client.get("/meals", headers={"X-User-ID": "not-a-uuid"})
    assert_error(r, 401, "UNAUTHORIZED")


def test_unknown_user_is_not_found(client):
    r = client.get("/users/me", headers=auth_headers(uuid.uuid4()))
    assert_error(r, 404, "NOT_FOUND")


# =============================================================================
# USERS
# =============================================================================


def test_user_lifecycle(client):
    """
    Register, read, update and delete the caller's profile.

    Verifies:
    - target_calories is computed at registration
    - PUT recomputes it when the goal changes
    - DELETE removes the user
    """
    user = _register(client)
    headers = auth_headers(user["user_id"])
    assert user["target_calories"] == 1584

    r = client.get("/users/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == user["email"]

    r = client.put("/users/me", json={"goal": "lose"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["target_calories"] == 1084

    r = client.delete("/users/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["deleted"] == user["user_id"]
    assert_error(client.get("/users/me", headers=headers), 404, "NOT_FOUND")


def test_duplicate_email_is_conflict(client):
    user = _register(client)
    r = client.post("/users", json={"email": user["email"]})
    assert_error(r, 409, "CONFLICT")


def test_invalid_email_is_validation_error(client):
    error = assert_error(client.post("/users", json={"email": "nope"}), 422, "VALIDATION_ERROR")
    assert error["details"]


# =============================================================================
# MEALS AND SUMMARIES
# =============================================================================


def test_meal_crud_keeps_daily_summary_in_step(client):
    user = _register(client)
    headers = auth_headers(user["user_id"])

    r = client.post("/meals", json=_meal_payload(), headers=headers)
    assert r.status_code == 201, r.text
    meal = r.json()
    assert meal["calories"] == 500

    daily = client.get("/nutrition/daily", params={"date": "2024-03-15"}, headers=headers).json()
    assert daily["totals"]["calories"] == 500
    assert daily["remaining"] == 1084
    assert daily["has_record"] is True

    r = client.put(
        f"/meals/{meal['meal_id']}",
        json={"eaten_at": "2024-03-16T08:00:00", "client_updated_at": meal["updated_at"]},
        headers=headers,
    )
    assert r.status_code == 200, r.text

    old_day = client.get("/nutrition/daily", params={"date": "2024-03-15"}, headers=headers).json()
    new_day = client.get("/nutrition/daily", params={"date": "2024-03-16"}, headers=headers).json()
    assert old_day["totals"]["calories"] == 0
    assert new_day["totals"]["calories"] == 500

    r = client.delete(f"/meals/{meal['meal_id']}", headers=headers)
    assert r.status_code == 200
    new_day = client.get("/nutrition/daily", params={"date": "2024-03-16"}, headers=headers).json()
    assert new_day["totals"]["calories"] == 0
    assert_error(client.get(f"/meals/{meal['meal_id']}", headers=headers), 404, "NOT_FOUND")


def test_list_meals_by_date_and_type(client):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    client.post("/meals", json=_meal_payload(meal_type="breakfast", eaten_at="2024-03-15T08:00:00"), headers=headers)
    client.post("/meals", json=_meal_payload(), headers=headers)
    client.post("/meals", json=_meal_payload(eaten_at="2024-03-16T12:00:00"), headers=headers)

    r = client.get("/meals", params={"date": "2024-03-15"}, headers=headers)
    assert [m["meal_type"] for m in r.json()] == ["lunch", "breakfast"]

    r = client.get("/meals", params={"meal_type": "lunch"}, headers=headers)
    assert len(r.json()) == 2


def test_stale_meal_update_is_conflict(client):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    meal = client.post("/meals", json=_meal_payload(), headers=headers).json()

    r = client.put(
        f"/meals/{meal['meal_id']}",
        json={"calories": 100, "client_updated_at": "2000-01-01T00:00:00"},
        headers=headers,
    )
    assert_error(r, 409, "CONFLICT")


def test_blank_description_update_is_rejected(client):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    meal = client.post("/meals", json=_meal_payload(), headers=headers).json()

    r = client.put(f"/meals/{meal['meal_id']}", json={"description": "   "}, headers=headers)
    assert_error(r, 422, "VALIDATION_ERROR")
    assert client.get(f"/meals/{meal['meal_id']}", headers=headers).json()["description"] == meal["description"]


def test_meal_without_macros_is_estimated(client, fake_llm):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    fake_llm.queue(VALID_ESTIMATE)

    r = client.post(
        "/meals",
        json={"description": "two eggs", "meal_type": "breakfast", "eaten_at": "2024-03-15T08:00:00"},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["calories"] == 120
    assert body["raw_response"]["confidence"] == "high"
    assert fake_llm.call_count == 1


def test_meal_estimation_upstream_failure_is_bad_gateway(client, fake_llm):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    fake_llm.queue(UpstreamError(details={"reason": "timeout"}))

    r = client.post(
        "/meals", json={"description": "mystery stew", "meal_type": "dinner"}, headers=headers
    )
    error = assert_error(r, 502, "UPSTREAM_ERROR")
    assert error["retryable"] is True
    assert client.get("/meals", headers=headers).json() == []


def test_partial_macros_are_rejected(client):
    user = _register(client)
    r = client.post(
        "/meals",
        json={"description": "toast", "meal_type": "snack", "calories": 90},
        headers=auth_headers(user["user_id"]),
    )
    assert_error(r, 422, "VALIDATION_ERROR")


def test_weekly_summary(client):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    client.post("/meals", json=_meal_payload(), headers=headers)
    client.post("/meals", json=_meal_payload(eaten_at="2024-03-13T12:00:00", calories=700), headers=headers)

    r = client.get("/nutrition/weekly", params={"end_date": "2024-03-15"}, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["start_date"] == "2024-03-09"
    assert len(body["days"]) == 7
    assert body["days_logged"] == 2
    assert body["totals"]["calories"] == 1200
    assert body["averages"]["calories"] == 600


# =============================================================================
# NUTRITION
# =============================================================================


def test_analyze_returns_estimate_and_caches(client, fake_llm):
    user = _register(client)
    headers = auth_headers(user["user_id"])
    fake_llm.queue(VALID_ESTIMATE)

    first = client.post("/nutrition/analyze", json={"description": "Two eggs"}, headers=headers)
    second = client.post("/nutrition/analyze", json={"description": "two eggs"}, headers=headers)

    assert first.status_code == 200, first.text
    assert first.json()["estimate"]["calories"] == 120
    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    assert fake_llm.call_count == 1


def test_analyze_malformed_twice_is_bad_gateway(client, fake_llm):
    user = _register(client)
    fake_llm.queue("no idea", '{"calories": "many"}')

    r = client.post(
        "/nutrition/analyze",
        json={"description": "grandma's casserole"},
        headers=auth_headers(user["user_id"]),
    )
    error = assert_error(r, 502, "MALFORMED_RESPONSE")
    assert error["retryable"] is True
    assert fake_llm.call_count == 2


def test_analyze_blank_description_is_rejected_without_call(client, fake_llm):
    user = _register(client)
    r = client.post(
        "/nutrition/analyze", json={"description": "   "}, headers=auth_headers(user["user_id"])
    )
    assert_error(r, 400, "SERVICE_VALIDATION_ERROR")
    assert fake_llm.call_count == 0


def test_insights_not_enough_data(client, fake_llm):
    user = _register(client)
    r = client.get("/nutrition/insights", headers=auth_headers(user["user_id"]))
    assert r.status_code == 200
    assert r.json()["status"] == "not_enough_data"
    assert fake_llm.call_count == 0


def test_tdee_calculator(client):
    r = client.post(
        "/nutrition/tdee",
        json={
            "weight_kg": 80,
            "height_cm": 180,
            "age": 30,
            "gender": "male",
            "activity_level": "moderate",
            "goal": "lose",
        },
    )
    assert r.status_code == 200
    assert r.json() == {"bmr": 1780.0, "tdee": 2759, "target_calories": 2259}


def test_tdee_rejects_non_positive_weight(client):
    r = client.post(
        "/nutrition/tdee",
        json={"weight_kg": 0, "height_cm": 180, "age": 30, "gender": "male"},
    )
    assert_error(r, 422, "VALIDATION_ERROR")


# =============================================================================
# GOALS
# =============================================================================


def test_goal_crud(client):
    user = _register(client)
    headers = auth_headers(user["user_id"])

    r = client.post("/goals", json={"target_weight_kg": 55, "target_date": "2024-09-01"}, headers=headers)
    assert r.status_code == 201, r.text
    goal = r.json()
    assert goal["status"] == "active"
    assert goal["current_weight_kg"] == 60

    r = client.put(f"/goals/{goal['goal_id']}", json={"status": "paused"}, headers=headers)
    assert r.json()["status"] == "paused"

    assert client.get("/goals", params={"status": "active"}, headers=headers).json() == []
    assert len(client.get("/goals", params={"status": "paused"}, headers=headers).json()) == 1

    r = client.delete(f"/goals/{goal['goal_id']}", headers=headers)
    assert r.status_code == 200
    assert client.get("/goals", headers=headers).json() == []


def test_unknown_goal_is_not_found(client):
    user = _register(client)
    r = client.put(
        f"/goals/{uuid.uuid4()}", json={"status": "paused"}, headers=auth_headers(user["user_id"])
    )
    assert_error(r, 404, "NOT_FOUND")
