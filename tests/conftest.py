"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from collections.abc import Callable
from datetime import datetime

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import random_source
from app.db.models import Base, Exercise, User, UserWorkout, Workout


# Enable foreign key constraints for SQLite
@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(autouse=True)
def seeded_random_source():
    """Deterministic plan randomness for every test."""
    random_source.configure(1234)
    yield


@pytest.fixture(scope="function")
def db_engine(monkeypatch):
    """In-memory SQLite engine patched into app.db.session.

    StaticPool keeps a single connection so the test session and the
    sessions opened by the services see the same database. Services go
    through the real get_session(), so commit/rollback behaviour is the
    production one.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    monkeypatch.setattr("app.db.session._get_engine", lambda: engine)
    monkeypatch.setattr("app.db.session._get_session_local", lambda: session_local)

    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for arranging and asserting data.

    Commit after arranging: services run in their own sessions.
    """
    session = Session(bind=db_engine)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(aim: int = 1, difficult: int = 2, **fields) -> User:
        user = User(aim=aim, difficult=difficult, **fields)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_workout(db_session: Session) -> Callable[..., Workout]:
    def _make_workout(title: str, aim: int = 1, difficult: int = 2, exercise_count: int = 2) -> Workout:
        exercises = [
            Exercise(title=f"{title} exercise {i + 1}", description=None, sets=3, reps=10, rest=60)
            for i in range(exercise_count)
        ]
        workout = Workout(title=title, description=f"{title} description", aim=aim, difficult=difficult, exercises=exercises)
        db_session.add(workout)
        db_session.commit()
        return workout

    return _make_workout


@pytest.fixture
def make_assignment(db_session: Session) -> Callable[..., UserWorkout]:
    def _make_assignment(user: User, workout: Workout, scheduled_date: datetime, is_done: bool = False) -> UserWorkout:
        assignment = UserWorkout(
            user_id=user.id,
            workout_id=workout.id,
            scheduled_date=scheduled_date,
            is_done=is_done,
        )
        db_session.add(assignment)
        db_session.commit()
        return assignment

    return _make_assignment


@pytest.fixture
def catalog(make_workout) -> dict[str, Workout]:
    """Two templates for aim=1/difficult=2 and one decoy for another goal."""
    return {
        "A": make_workout("Template A", aim=1, difficult=2, exercise_count=3),
        "B": make_workout("Template B", aim=1, difficult=2, exercise_count=2),
        "other": make_workout("Other Goal", aim=3, difficult=2, exercise_count=4),
    }
