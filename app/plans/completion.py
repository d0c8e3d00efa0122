"""Completion tracking for scheduled assignments."""

from datetime import date, datetime

from loguru import logger
from sqlalchemy import select, update

from app.db.models import UserWorkout
from app.db.session import get_session
from app.plans.calendar_days import day_bounds, to_calendar_day
from app.plans.errors import AssignmentNotFoundError


def mark_done(user_id: int, workout_id: int, day: date | datetime | str) -> None:
    """Mark the assignment scheduled on `day` as done.

    Matching is by calendar day: time-of-day is ignored on both the request
    and the stored date. Marking an already-done assignment succeeds.

    Args:
        user_id: User ID
        workout_id: Template ID of the assignment
        day: Day to match (date, datetime or ISO-8601 string)

    Raises:
        InvalidPlanRequestError: If `day` is an unparseable string
        AssignmentNotFoundError: If no assignment matches
        StoreFailureError: If the store fails
    """
    target_day = to_calendar_day(day)
    start, end = day_bounds(target_day)
    match = (
        UserWorkout.user_id == user_id,
        UserWorkout.workout_id == workout_id,
        UserWorkout.scheduled_date >= start,
        UserWorkout.scheduled_date < end,
    )

    with get_session() as session:
        found = session.execute(select(UserWorkout.is_done).where(*match)).first()
        if found is None:
            logger.warning(
                "Assignment not found",
                user_id=user_id,
                workout_id=workout_id,
                date=target_day.isoformat(),
            )
            raise AssignmentNotFoundError(user_id, workout_id, target_day)

        if found.is_done:
            logger.info("Assignment already done", user_id=user_id, workout_id=workout_id, date=target_day.isoformat())
            return

        session.execute(update(UserWorkout).where(*match).values(is_done=True))

    logger.info("Assignment marked done", user_id=user_id, workout_id=workout_id, date=target_day.isoformat())
