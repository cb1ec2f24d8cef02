"""
Profile and goal service tests.

Covers registration, target recomputation on profile changes, duplicate
emails, cascade deletion and the goal lifecycle.
"""

import uuid
from datetime import date

import pytest
from sqlalchemy.orm import Session

from app.context import UserContext
from app.exceptions import ConflictError, NotFoundError
from domain.enums import ActivityLevel, GoalStatus, GoalType
from domain.models import DailySummary, Goal, Meal
from domain.schemas.goal_schemas import GoalCreate, GoalUpdate
from domain.schemas.profile_schemas import ProfileUpdateRequest
from repositories import UserRepository
from services.goal_service import GoalService
from services.profile_service import ProfileService
from test_fixtures import make_ctx, make_meal, make_user, unique_email


# =============================================================================
# PROFILES
# =============================================================================


def test_create_user_with_biometrics_computes_target(db_session: Session):
    """
    Test ProfileService.create_user with complete biometrics.

    Verifies:
    - user gets a UUID and timestamps
    - target_calories follows BMR x activity + goal offset
    """
    user = make_user(db_session, profile_type="athlete")

    assert isinstance(user.user_id, uuid.UUID)
    assert user.created_at is not None
    # 80 kg, 180 cm, 25 y, male: BMR 1805, x1.55 = 2797.75 -> 2798, +500
    assert user.target_calories == 3298


def test_create_user_without_biometrics_has_no_target(db_session: Session):
    user = make_user(db_session, profile_type="casual")
    assert user.target_calories is None
    assert user.activity_level == ActivityLevel.LIGHT


def test_duplicate_email_conflicts(db_session: Session):
    email = unique_email("dup")
    make_user(db_session, email=email)
    with pytest.raises(ConflictError):
        make_user(db_session, email=email)


def test_update_profile_recomputes_target(db_session: Session):
    user = make_user(db_session)
    ctx = make_ctx(user)
    before = user.target_calories

    updated = ProfileService.update_profile(
        db_session, ctx, ProfileUpdateRequest(goal=GoalType.LOSE)
    )
    assert updated.target_calories == before - 500

    updated = ProfileService.update_profile(
        db_session, ctx, ProfileUpdateRequest(activity_level=ActivityLevel.ACTIVE)
    )
    assert updated.target_calories > before - 500


def test_update_profile_name_only_keeps_target(db_session: Session):
    user = make_user(db_session)
    before = user.target_calories
    updated = ProfileService.update_profile(
        db_session, make_ctx(user), ProfileUpdateRequest(full_name="Sarah M.")
    )
    assert updated.full_name == "Sarah M."
    assert updated.target_calories == before


def test_completing_biometrics_sets_target(db_session: Session):
    user = make_user(db_session, profile_type="casual")
    updated = ProfileService.update_profile(
        db_session,
        make_ctx(user),
        ProfileUpdateRequest(age=40, gender="Male", height_cm=175, weight_kg=85),
    )
    assert updated.gender == "male"
    assert updated.target_calories is not None


def test_get_profile_unknown_user(db_session: Session):
    with pytest.raises(NotFoundError):
        ProfileService.get_profile(db_session, UserContext(user_id=uuid.uuid4()))


def test_delete_user_cascades(db_session: Session):
    """
    Test that deleting a user removes meals, goals and summaries.
    """
    user = make_user(db_session)
    ctx = make_ctx(user)
    make_meal(db_session, user)
    GoalService.create_goal(db_session, ctx, GoalCreate(target_weight_kg=55))

    ProfileService.delete_user(db_session, ctx)

    assert UserRepository(db_session).get_by_id(ctx.user_id) is None
    assert db_session.query(Meal).filter(Meal.user_id == ctx.user_id).count() == 0
    assert db_session.query(Goal).filter(Goal.user_id == ctx.user_id).count() == 0
    assert (
        db_session.query(DailySummary).filter(DailySummary.user_id == ctx.user_id).count()
        == 0
    )
    with pytest.raises(NotFoundError):
        ProfileService.delete_user(db_session, ctx)


# =============================================================================
# GOALS
# =============================================================================


def test_goal_defaults_to_active_and_current_weight(db_session: Session):
    user = make_user(db_session)
    goal = GoalService.create_goal(
        db_session, make_ctx(user), GoalCreate(target_weight_kg=55, target_date=date(2024, 9, 1))
    )
    assert goal.status == GoalStatus.ACTIVE
    assert goal.current_weight_kg == user.weight_kg


def test_goal_status_transitions_are_free(db_session: Session):
    user = make_user(db_session)
    ctx = make_ctx(user)
    goal = GoalService.create_goal(db_session, ctx, GoalCreate(target_weight_kg=55))

    for status in (GoalStatus.PAUSED, GoalStatus.ACTIVE, GoalStatus.COMPLETED, GoalStatus.ACTIVE):
        goal = GoalService.update_goal(db_session, ctx, goal.goal_id, GoalUpdate(status=status))
        assert goal.status == status


def test_list_goals_filters_by_status(db_session: Session):
    user = make_user(db_session)
    ctx = make_ctx(user)
    first = GoalService.create_goal(db_session, ctx, GoalCreate(target_weight_kg=58))
    GoalService.create_goal(db_session, ctx, GoalCreate(target_weight_kg=55))
    GoalService.update_goal(
        db_session, ctx, first.goal_id, GoalUpdate(status=GoalStatus.COMPLETED)
    )

    assert len(GoalService.list_goals(db_session, ctx)) == 2
    completed = GoalService.list_goals(db_session, ctx, status=GoalStatus.COMPLETED)
    assert [g.goal_id for g in completed] == [first.goal_id]


def test_goals_are_private(db_session: Session):
    owner = make_user(db_session)
    other = make_user(db_session, profile_type="athlete")
    goal = GoalService.create_goal(db_session, make_ctx(owner), GoalCreate(target_weight_kg=55))

    with pytest.raises(NotFoundError):
        GoalService.update_goal(
            db_session, make_ctx(other), goal.goal_id, GoalUpdate(status=GoalStatus.PAUSED)
        )
    with pytest.raises(NotFoundError):
        GoalService.delete_goal(db_session, make_ctx(other), goal.goal_id)

    GoalService.delete_goal(db_session, make_ctx(owner), goal.goal_id)
    assert GoalService.list_goals(db_session, make_ctx(owner)) == []
