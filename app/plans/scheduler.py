"""Plan generation.

Regeneration replaces the user's future, incomplete assignments with a
freshly generated schedule. Completed and past-dated assignments are
history and are never touched.

Spacing is computed per index (floor(i * 7 / frequency)) rather than
accumulated, so the shape of the schedule is fixed while the template on
each slot varies between regenerations.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core import random_source
from app.db.models import User, UserWorkout, Workout
from app.db.session import get_session
from app.plans.calendar_days import start_of_day, utc_now
from app.plans.catalog import find_eligible_workouts
from app.plans.errors import InvalidPlanRequestError, NoEligibleWorkoutsError, UserNotFoundError
from app.plans.types import AssignmentView

WEEKS_PER_MONTH = 4
DAYS_PER_WEEK = 7

Slot = tuple[int, datetime]


def _validate_request(months: int, frequency_per_week: int) -> None:
    """Both values must be positive integers within the configured bounds.

    The frequency bound never exceeds one session per day, so a plan never
    schedules two of its own sessions on the same day.
    """
    limits = (
        ("months", months, settings.max_plan_months),
        ("frequency_per_week", frequency_per_week, settings.max_frequency_per_week),
    )
    for name, value, upper in limits:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidPlanRequestError(f"{name} must be a positive integer, got {value!r}")
        if value > upper:
            raise InvalidPlanRequestError(f"{name} must be at most {upper}, got {value}")


def session_offsets(months: int, frequency_per_week: int) -> list[int]:
    """Day offsets from tomorrow for every session of a plan.

    Equivalent to floor(i * (7 / frequency_per_week)) computed in integers,
    so no float rounding can shift a session by a day.
    """
    total_sessions = frequency_per_week * WEEKS_PER_MONTH * months
    return [(i * DAYS_PER_WEEK) // frequency_per_week for i in range(total_sessions)]


def _lock_user(session: Session, user_id: int) -> User:
    """Load the user with a row lock so regenerations for one user serialize."""
    user = session.execute(select(User).where(User.id == user_id).with_for_update()).scalar_one_or_none()
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def _delete_future_incomplete(session: Session, user_id: int, now: datetime) -> int:
    result = session.execute(
        delete(UserWorkout).where(
            UserWorkout.user_id == user_id,
            UserWorkout.is_done.is_(False),
            UserWorkout.scheduled_date > now,
        )
    )
    return result.rowcount or 0


def _occupied_slots(session: Session, user_id: int, since: datetime) -> set[Slot]:
    """(workout_id, day) keys still held by surviving assignments from `since` on."""
    rows = session.execute(
        select(UserWorkout.workout_id, UserWorkout.scheduled_date).where(
            UserWorkout.user_id == user_id,
            UserWorkout.scheduled_date >= since,
        )
    ).all()
    return {(workout_id, scheduled_date) for workout_id, scheduled_date in rows}


def _pick_template(eligible: list[Workout], scheduled_date: datetime, occupied: set[Slot]) -> Workout | None:
    """Uniform pick with replacement, avoiding keys that already exist on that day.

    A redraw among the free templates keeps the pick uniform over them.
    Returns None only when every eligible template is taken on that day.
    """
    workout = random_source.choice(eligible)
    if (workout.id, scheduled_date) not in occupied:
        return workout
    free = [w for w in eligible if (w.id, scheduled_date) not in occupied]
    if not free:
        return None
    return random_source.choice(free)


def _build_assignment(user_id: int, workout_id: int, scheduled_date: datetime) -> UserWorkout:
    return UserWorkout(
        user_id=user_id,
        workout_id=workout_id,
        scheduled_date=scheduled_date,
        is_done=False,
    )


def generate_plan(
    user_id: int,
    months: int,
    frequency_per_week: int,
    *,
    now: datetime | None = None,
) -> list[AssignmentView]:
    """Regenerate the user's forward-looking plan.

    Flow:
    1. Lock and load the user
    2. Load and shuffle eligible templates
    3. Delete future incomplete assignments
    4. Insert frequency_per_week * 4 * months new assignments from tomorrow
    5. Commit (everything rolls back on any failure)

    Args:
        user_id: User ID
        months: Plan horizon in 4-week months
        frequency_per_week: Sessions per week
        now: Regeneration time as naive UTC (defaults to the current time)

    Returns:
        New assignments in generation order

    Raises:
        InvalidPlanRequestError: If months or frequency_per_week is not positive or exceeds its configured maximum
        UserNotFoundError: If the user does not exist
        NoEligibleWorkoutsError: If no template matches the user's aim/difficult
        StoreFailureError: If the store fails (transaction rolled back)
    """
    _validate_request(months, frequency_per_week)
    now = now or utc_now()
    tomorrow = start_of_day(now.date() + timedelta(days=1))
    offsets = session_offsets(months, frequency_per_week)

    logger.info(
        "Starting plan generation",
        user_id=user_id,
        months=months,
        frequency_per_week=frequency_per_week,
        total_sessions=len(offsets),
    )

    created: list[AssignmentView] = []
    with get_session() as session:
        user = _lock_user(session, user_id)

        eligible = find_eligible_workouts(session, user.aim, user.difficult)
        if not eligible:
            raise NoEligibleWorkoutsError(user.aim, user.difficult)
        random_source.shuffle(eligible)

        deleted = _delete_future_incomplete(session, user_id, now)
        occupied = _occupied_slots(session, user_id, tomorrow)

        for offset in offsets:
            scheduled_date = tomorrow + timedelta(days=offset)
            workout = _pick_template(eligible, scheduled_date, occupied)
            if workout is None:
                logger.warning(
                    "Every eligible template already assigned on day, skipping slot",
                    user_id=user_id,
                    scheduled_date=scheduled_date.date().isoformat(),
                )
                continue
            session.add(_build_assignment(user_id, workout.id, scheduled_date))
            occupied.add((workout.id, scheduled_date))
            created.append(AssignmentView.from_template(workout, scheduled_date, is_done=False))

        session.flush()

        logger.info(
            "Plan generation complete",
            user_id=user_id,
            deleted_count=deleted,
            created_count=len(created),
            eligible_templates=len(eligible),
        )

    return created
