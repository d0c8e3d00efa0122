"""Tests for the transactional session scope."""

import pytest
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.db.models import User
from app.db.session import get_session
from app.plans.errors import StoreFailureError, UserNotFoundError


def _user_count(db_session) -> int:
    db_session.expire_all()
    return len(db_session.execute(select(User)).scalars().all())


def test_commits_on_success(db_session):
    with get_session() as session:
        session.add(User(aim=1, difficult=1))

    assert _user_count(db_session) == 1


def test_business_error_rolls_back_and_propagates(db_session):
    with pytest.raises(UserNotFoundError):
        with get_session() as session:
            session.add(User(aim=1, difficult=1))
            session.flush()
            raise UserNotFoundError(1)

    assert _user_count(db_session) == 0


def test_http_exception_rolls_back_and_propagates(db_session):
    with pytest.raises(HTTPException):
        with get_session() as session:
            session.add(User(aim=1, difficult=1))
            session.flush()
            raise HTTPException(status_code=400)

    assert _user_count(db_session) == 0


def test_database_error_becomes_store_failure(db_session):
    with get_session() as session:
        session.add(User(email="dup@example.com", aim=1, difficult=1))

    with pytest.raises(StoreFailureError) as exc_info:
        with get_session() as session:
            session.add(User(email="other@example.com", aim=1, difficult=1))
            session.add(User(email="dup@example.com", aim=1, difficult=1))

    assert isinstance(exc_info.value.__cause__, IntegrityError)
    assert _user_count(db_session) == 1
