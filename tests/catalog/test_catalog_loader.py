"""Tests for the YAML catalog loader."""

from pathlib import Path

import pytest
from sqlalchemy import select

from app.catalog.loader import CatalogError, load_catalog, seed_catalog
from app.db.models import Exercise, Workout

BUNDLED_CATALOG = Path(__file__).parent.parent.parent / "data" / "catalog.yaml"

SMALL_CATALOG = """
exercises:
  - key: squat
    title: Squat
    sets: 3
    reps: 15
    rest: 60
  - key: plank
    title: Plank
    description: Hold
    sets: 3
    reps: 45
workouts:
  - title: Legs
    aim: 1
    difficult: 2
    exercises: [squat, plank]
  - title: Core
    description: Core only
    aim: 1
    difficult: 1
    exercises: [plank]
"""


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalog.yaml"
    path.write_text(SMALL_CATALOG, encoding="utf-8")
    return path


def test_load_catalog(catalog_file):
    catalog = load_catalog(catalog_file)

    assert [ex.key for ex in catalog.exercises] == ["squat", "plank"]
    assert catalog.exercises[1].rest == 0
    assert catalog.workouts[0].exercises == ["squat", "plank"]


def test_bundled_catalog_is_valid():
    catalog = load_catalog(BUNDLED_CATALOG)

    assert catalog.workouts
    assert {(w.aim, w.difficult) for w in catalog.workouts} >= {(1, 1), (1, 2), (2, 2)}


def test_missing_file_raises(tmp_path):
    with pytest.raises(CatalogError, match="not found"):
        load_catalog(tmp_path / "nope.yaml")


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("exercises: [unclosed", encoding="utf-8")

    with pytest.raises(CatalogError, match="Invalid YAML"):
        load_catalog(path)


def test_unknown_exercise_reference_raises(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "exercises: []\nworkouts:\n  - title: Ghost\n    aim: 1\n    difficult: 1\n    exercises: [missing]\n",
        encoding="utf-8",
    )

    with pytest.raises(CatalogError, match="unknown exercises"):
        load_catalog(path)


def test_duplicate_exercise_keys_raise(tmp_path):
    path = tmp_path / "dup.yaml"
    path.write_text(
        "exercises:\n"
        "  - {key: a, title: A, sets: 1, reps: 1}\n"
        "  - {key: a, title: B, sets: 1, reps: 1}\n",
        encoding="utf-8",
    )

    with pytest.raises(CatalogError, match="Duplicate exercise keys"):
        load_catalog(path)


def test_seed_catalog_inserts_templates(db_session, catalog_file):
    result = seed_catalog(catalog_file)

    assert (result.workouts_created, result.workouts_skipped, result.exercises_created) == (2, 0, 2)
    legs = db_session.execute(select(Workout).where(Workout.title == "Legs")).scalar_one()
    assert (legs.aim, legs.difficult) == (1, 2)
    assert [ex.title for ex in legs.exercises] == ["Squat", "Plank"]


def test_seed_catalog_is_repeatable(db_session, catalog_file):
    seed_catalog(catalog_file)
    result = seed_catalog(catalog_file)

    assert (result.workouts_created, result.workouts_skipped, result.exercises_created) == (0, 2, 0)
    assert len(db_session.execute(select(Workout)).scalars().all()) == 2
    assert len(db_session.execute(select(Exercise)).scalars().all()) == 2
