"""API endpoints for workout plans.

Thin layer over the plan engine: parameter validation and error
translation only. The user ID comes from the path; authentication is
handled upstream.
"""

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel, Field

from app.api.errors import to_http_exception
from app.config.settings import settings
from app.plans.completion import mark_done
from app.plans.errors import PlanError
from app.plans.schedule_reader import get_schedule
from app.plans.scheduler import generate_plan
from app.plans.stats import get_stats
from app.plans.types import AssignmentView, StatsView

router = APIRouter(prefix="/api/users/{user_id}", tags=["plans"])


class GeneratePlanRequest(BaseModel):
    """Request body for plan generation. Missing fields fall back to settings."""

    months: int | None = Field(default=None, ge=1, le=settings.max_plan_months)
    frequency_per_week: int | None = Field(default=None, ge=1, le=settings.max_frequency_per_week)


class GeneratePlanResponse(BaseModel):
    status: str = "plan_created"
    workouts: list[AssignmentView]


class CompleteWorkoutRequest(BaseModel):
    """Request body for completion. `date` accepts "2026-02-07" or a full ISO datetime."""

    workout_id: int
    date: str = Field(min_length=1)


class CompleteWorkoutResponse(BaseModel):
    status: str = "success"
    message: str = "workout marked as completed"
    workout_id: int


@router.post("/workouts/generate", response_model=GeneratePlanResponse)
def generate_workout_plan(
    user_id: int,
    request: GeneratePlanRequest | None = None,
) -> GeneratePlanResponse:
    """Replace the user's future incomplete workouts with a new plan.

    Raises:
        HTTPException: 404 if the user is unknown or no template matches, 500 on store failure
    """
    request = request or GeneratePlanRequest()
    months = request.months or settings.default_plan_months
    frequency = request.frequency_per_week or settings.default_frequency_per_week
    logger.info("Generate plan requested", user_id=user_id, months=months, frequency_per_week=frequency)

    try:
        workouts = generate_plan(user_id, months, frequency)
    except PlanError as e:
        raise to_http_exception(e) from e

    return GeneratePlanResponse(workouts=workouts)


@router.get("/workouts", response_model=list[AssignmentView])
def get_workouts(user_id: int) -> list[AssignmentView]:
    """Get the user's full schedule ordered by date."""
    try:
        return get_schedule(user_id)
    except PlanError as e:
        raise to_http_exception(e) from e


@router.patch("/workouts/complete", response_model=CompleteWorkoutResponse)
def complete_workout(user_id: int, request: CompleteWorkoutRequest) -> CompleteWorkoutResponse:
    """Mark the workout scheduled on the given calendar day as done.

    Raises:
        HTTPException: 404 if no assignment matches, 422 if the date is not ISO-8601
    """
    try:
        mark_done(user_id, request.workout_id, request.date)
    except PlanError as e:
        raise to_http_exception(e) from e

    return CompleteWorkoutResponse(workout_id=request.workout_id)


@router.get("/stats", response_model=StatsView)
def get_user_stats(user_id: int) -> StatsView:
    """Get adherence stats for the user."""
    try:
        return get_stats(user_id)
    except PlanError as e:
        raise to_http_exception(e) from e
