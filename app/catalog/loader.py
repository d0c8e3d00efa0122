"""Workout catalog loader.

Reads workout templates and exercises from a YAML file and seeds the
catalog tables. The engine itself never writes to the catalog; this loader
is the only writer and is run from the CLI or at deploy time.

File layout:

    exercises:
      - key: push_up
        title: Push-up
        description: Standard push-up
        sets: 3
        reps: 12
        rest: 60
    workouts:
      - title: Upper Body Basics
        description: Entry-level upper body session
        aim: 1
        difficult: 1
        exercises: [push_up]
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, model_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import Exercise, Workout
from app.db.session import get_session


class CatalogError(ValueError):
    """Raised when a catalog file cannot be read or fails validation."""


class CatalogExercise(BaseModel):
    key: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str | None = None
    sets: int = Field(ge=0)
    reps: int = Field(ge=0)
    rest: int = Field(default=0, ge=0)


class CatalogWorkout(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    aim: int = Field(ge=0)
    difficult: int = Field(ge=0)
    exercises: list[str] = Field(default_factory=list)


class Catalog(BaseModel):
    exercises: list[CatalogExercise] = Field(default_factory=list)
    workouts: list[CatalogWorkout] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> Catalog:
        keys = [ex.key for ex in self.exercises]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"Duplicate exercise keys: {', '.join(duplicates)}")

        known = set(keys)
        for workout in self.workouts:
            missing = [key for key in workout.exercises if key not in known]
            if missing:
                raise ValueError(f"Workout '{workout.title}' references unknown exercises: {', '.join(missing)}")
        return self


@dataclass(frozen=True)
class SeedResult:
    """Outcome of a catalog seed.

    Attributes:
        workouts_created: Templates inserted
        workouts_skipped: Templates already present (matched by title)
        exercises_created: Exercises inserted
    """

    workouts_created: int
    workouts_skipped: int
    exercises_created: int


def load_catalog(path: str | Path) -> Catalog:
    """Parse and validate a catalog file.

    Raises:
        CatalogError: If the file is missing, not YAML, or invalid
    """
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise CatalogError(f"Catalog file not found: {catalog_path}")

    try:
        with catalog_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {catalog_path}: {e}") from e

    try:
        catalog = Catalog.model_validate(raw)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {catalog_path}: {e}") from e

    logger.info(
        "Catalog loaded",
        path=str(catalog_path),
        exercises=len(catalog.exercises),
        workouts=len(catalog.workouts),
    )
    return catalog


def _get_or_create_exercises(session: Session, catalog: Catalog) -> tuple[dict[str, Exercise], int]:
    existing = {ex.title: ex for ex in session.execute(select(Exercise)).scalars().all()}
    by_key: dict[str, Exercise] = {}
    created = 0
    for item in catalog.exercises:
        exercise = existing.get(item.title)
        if exercise is None:
            exercise = Exercise(
                title=item.title,
                description=item.description,
                sets=item.sets,
                reps=item.reps,
                rest=item.rest,
            )
            session.add(exercise)
            existing[item.title] = exercise
            created += 1
        by_key[item.key] = exercise
    return by_key, created


def seed_catalog(path: str | Path) -> SeedResult:
    """Insert catalog templates that are not already present.

    Runs in a single transaction: either the whole file is applied or
    nothing is.

    Raises:
        CatalogError: If the catalog file is invalid
        StoreFailureError: If the store fails
    """
    catalog = load_catalog(path)

    with get_session() as session:
        exercises_by_key, exercises_created = _get_or_create_exercises(session, catalog)
        existing_titles = set(session.execute(select(Workout.title)).scalars().all())

        created = 0
        skipped = 0
        for item in catalog.workouts:
            if item.title in existing_titles:
                skipped += 1
                continue
            session.add(
                Workout(
                    title=item.title,
                    description=item.description,
                    aim=item.aim,
                    difficult=item.difficult,
                    exercises=[exercises_by_key[key] for key in item.exercises],
                )
            )
            existing_titles.add(item.title)
            created += 1
        session.flush()

    result = SeedResult(workouts_created=created, workouts_skipped=skipped, exercises_created=exercises_created)
    logger.info(
        "Catalog seeded",
        workouts_created=result.workouts_created,
        workouts_skipped=result.workouts_skipped,
        exercises_created=result.exercises_created,
    )
    return result
