"""Adherence statistics derived from the assignment ledger.

Pure reads. A user without assignments (or an unknown user) gets zeroed
stats rather than an error.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger
from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.db.models import UserWorkout, Workout, workout_exercises
from app.db.session import get_session
from app.plans.types import StatsView


def completion_rate(total_done: int, total_assigned: int) -> float:
    """Percentage of assignments done, rounded half-up to one decimal."""
    if total_assigned <= 0:
        return 0.0
    rate = Decimal(total_done) * 100 / Decimal(total_assigned)
    return float(rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def day_completion(rows: Iterable[tuple[datetime, bool]]) -> dict[date, bool]:
    """Collapse assignments to scheduled days; a day is complete when all its assignments are done."""
    days: dict[date, bool] = {}
    for scheduled_date, is_done in rows:
        day = scheduled_date.date()
        days[day] = days.get(day, True) and bool(is_done)
    return days


def current_streak(days: Mapping[date, bool]) -> int:
    """Consecutive complete scheduled days, counted back from the latest complete one.

    Days with nothing scheduled are not gaps. Scheduled days after the
    latest complete day are ignored.
    """
    complete_days = [day for day, done in days.items() if done]
    if not complete_days:
        return 0
    latest = max(complete_days)

    streak = 0
    for day in sorted((d for d in days if d <= latest), reverse=True):
        if not days[day]:
            break
        streak += 1
    return streak


def _count_assignments(session: Session, user_id: int) -> tuple[int, int]:
    total_assigned, total_done = session.execute(
        select(
            func.count(),
            func.coalesce(func.sum(case((UserWorkout.is_done.is_(True), 1), else_=0)), 0),
        ).where(UserWorkout.user_id == user_id)
    ).one()
    return int(total_assigned), int(total_done)


def _count_completed_exercises(session: Session, user_id: int) -> int:
    count = session.execute(
        select(func.count())
        .select_from(UserWorkout)
        .join(workout_exercises, workout_exercises.c.workout_id == UserWorkout.workout_id)
        .where(UserWorkout.user_id == user_id, UserWorkout.is_done.is_(True))
    ).scalar_one()
    return int(count)


def _favorite_workout(session: Session, user_id: int) -> str | None:
    """Title of the most completed template; ties go to the lowest workout ID."""
    completions = func.count().label("completions")
    row = session.execute(
        select(Workout.title, completions)
        .join(UserWorkout, UserWorkout.workout_id == Workout.id)
        .where(UserWorkout.user_id == user_id, UserWorkout.is_done.is_(True))
        .group_by(Workout.id, Workout.title)
        .order_by(completions.desc(), Workout.id)
        .limit(1)
    ).first()
    return row.title if row else None


def _load_day_completion(session: Session, user_id: int) -> dict[date, bool]:
    rows = session.execute(
        select(UserWorkout.scheduled_date, UserWorkout.is_done).where(UserWorkout.user_id == user_id)
    ).all()
    return day_completion((scheduled_date, is_done) for scheduled_date, is_done in rows)


def get_stats(user_id: int) -> StatsView:
    """Compute adherence stats for a user.

    Raises:
        StoreFailureError: If the store fails
    """
    with get_session() as session:
        total_assigned, total_done = _count_assignments(session, user_id)
        stats = StatsView(
            total_workouts=total_done,
            completion_rate=completion_rate(total_done, total_assigned),
            total_exercises=_count_completed_exercises(session, user_id),
            current_streak=current_streak(_load_day_completion(session, user_id)),
            favorite_workout=_favorite_workout(session, user_id),
        )

    logger.debug(
        "Computed user stats",
        user_id=user_id,
        total_assigned=total_assigned,
        total_done=total_done,
    )
    return stats
