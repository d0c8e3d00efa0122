"""Denormalized schedule view of a user's assignments."""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.db.models import UserWorkout, Workout
from app.db.session import get_session
from app.plans.types import AssignmentView


def get_schedule(user_id: int) -> list[AssignmentView]:
    """All assignments of a user, history and future, ordered by scheduled date.

    Assignments on the same day keep a stable order by workout ID.

    Raises:
        StoreFailureError: If the store fails
    """
    query = (
        select(UserWorkout)
        .options(selectinload(UserWorkout.workout).selectinload(Workout.exercises))
        .where(UserWorkout.user_id == user_id)
        .order_by(UserWorkout.scheduled_date.asc(), UserWorkout.workout_id.asc())
    )

    with get_session() as session:
        assignments = session.execute(query).scalars().all()
        schedule = [AssignmentView.from_model(assignment) for assignment in assignments]

    logger.debug("Loaded schedule", user_id=user_id, assignments=len(schedule))
    return schedule
