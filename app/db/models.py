from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""


workout_exercises = Table(
    "workout_exercises",
    Base.metadata,
    Column("workout_id", Integer, ForeignKey("workouts.id", ondelete="CASCADE"), primary_key=True),
    Column("exercise_id", Integer, ForeignKey("exercises.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """User account as seen by the plan engine.

    Credentials and login state live in the account subsystem. The engine
    only reads aim/difficult when selecting templates; the profile module
    may update the biometric and tag fields.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True, unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    lastname: Mapped[str | None] = mapped_column(String, nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)
    aim: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    difficult: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))


class Exercise(Base):
    """Catalog exercise. Immutable from the engine's point of view."""

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rest: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # seconds


class Workout(Base):
    """Workout template from the catalog.

    Templates are matched to users by exact (aim, difficult) equality.
    """

    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    aim: Mapped[int] = mapped_column(Integer, nullable=False)
    difficult: Mapped[int] = mapped_column(Integer, nullable=False)

    exercises: Mapped[list[Exercise]] = relationship(
        "Exercise",
        secondary=workout_exercises,
        order_by=Exercise.id,
    )

    __table_args__ = (Index("idx_workouts_aim_difficult", "aim", "difficult"),)


class UserWorkout(Base):
    """Assignment ledger row: user is scheduled to perform a workout on a day.

    Identity is (user_id, workout_id, scheduled_date). scheduled_date is
    always stored as midnight of its calendar day.
    """

    __tablename__ = "user_workouts"

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), primary_key=True)
    workout_id: Mapped[int] = mapped_column(Integer, ForeignKey("workouts.id"), primary_key=True)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime, primary_key=True)
    is_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    workout: Mapped[Workout] = relationship("Workout")

    __table_args__ = (
        Index("idx_user_workouts_user_date", "user_id", "scheduled_date"),  # Schedule reads and regeneration deletes
    )
