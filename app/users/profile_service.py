"""Service for reading and updating user profiles.

Updates go through an explicit model of the mutable fields. Unknown fields
are rejected at the boundary instead of being passed through to the store.
Changing aim/difficult never touches existing assignments; the next plan
generation picks up the new tags.
"""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import User
from app.db.session import get_session
from app.plans.errors import UserNotFoundError


class ProfileUpdate(BaseModel):
    """Partial profile update. Only fields explicitly set to a value are written."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    lastname: str | None = None
    weight: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    aim: int | None = Field(default=None, ge=0)
    difficult: int | None = Field(default=None, ge=0)


class ProfileView(BaseModel):
    """Public profile fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str | None = None
    name: str | None = None
    lastname: str | None = None
    weight: float | None = None
    height: float | None = None
    aim: int
    difficult: int


def _get_user(session: Session, user_id: int) -> User:
    user = session.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def get_profile(user_id: int) -> ProfileView:
    """Load a user's profile.

    Raises:
        UserNotFoundError: If the user does not exist
    """
    with get_session() as session:
        return ProfileView.model_validate(_get_user(session, user_id))


def update_profile(user_id: int, update: ProfileUpdate) -> ProfileView:
    """Apply a partial update and return the updated profile.

    Raises:
        UserNotFoundError: If the user does not exist
    """
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    with get_session() as session:
        user = _get_user(session, user_id)
        for field, value in changes.items():
            setattr(user, field, value)
        session.flush()
        profile = ProfileView.model_validate(user)

    logger.info("Profile updated", user_id=user_id, fields=sorted(changes))
    return profile
