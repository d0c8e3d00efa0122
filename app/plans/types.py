"""Domain types for plan assignment and progress.

Views are detached snapshots built inside the session that loaded the rows,
so callers can use them after the transaction has closed.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.db.models import Exercise, UserWorkout, Workout


class ExerciseView(BaseModel):
    """Exercise detail nested in an assignment."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    description: str | None = None
    sets: int
    reps: int
    rest: int


class AssignmentView(BaseModel):
    """An assignment joined with its template.

    Attributes:
        workout_id: Template ID
        title: Template title
        description: Template description
        aim: Template goal tag
        difficult: Template difficulty tag
        scheduled_date: Midnight of the scheduled calendar day
        is_done: Completion flag
        exercises: Template exercises ordered by exercise ID
    """

    workout_id: int
    title: str
    description: str | None = None
    aim: int
    difficult: int
    scheduled_date: datetime
    is_done: bool
    exercises: list[ExerciseView] = Field(default_factory=list)

    @classmethod
    def from_template(cls, workout: Workout, scheduled_date: datetime, is_done: bool) -> AssignmentView:
        return cls(
            workout_id=workout.id,
            title=workout.title,
            description=workout.description,
            aim=workout.aim,
            difficult=workout.difficult,
            scheduled_date=scheduled_date,
            is_done=is_done,
            exercises=[exercise_view(ex) for ex in workout.exercises],
        )

    @classmethod
    def from_model(cls, assignment: UserWorkout) -> AssignmentView:
        return cls.from_template(assignment.workout, assignment.scheduled_date, assignment.is_done)


class StatsView(BaseModel):
    """Adherence metrics derived from the assignment ledger.

    Attributes:
        total_workouts: Number of completed assignments
        completion_rate: Completed / assigned in percent, one decimal, half-up
        total_exercises: Exercises across completed assignments, once per assignment
        current_streak: Consecutive fully completed scheduled days
        favorite_workout: Title of the most completed template
    """

    total_workouts: int = 0
    completion_rate: float = 0.0
    total_exercises: int = 0
    current_streak: int = 0
    favorite_workout: str | None = None


def exercise_view(exercise: Exercise) -> ExerciseView:
    return ExerciseView.model_validate(exercise)
