"""Read-only queries against the workout catalog."""

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.db.models import Workout


def find_eligible_workouts(session: Session, aim: int, difficult: int) -> list[Workout]:
    """Templates whose goal and difficulty exactly match, with exercises loaded."""
    query = (
        select(Workout)
        .options(selectinload(Workout.exercises))
        .where(Workout.aim == aim, Workout.difficult == difficult)
        .order_by(Workout.id)
    )
    return list(session.execute(query).scalars().all())
