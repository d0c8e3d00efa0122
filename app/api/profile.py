"""Profile API endpoints.

PATCH accepts only the enumerated mutable fields; anything else is a 422.
"""

from __future__ import annotations

from fastapi import APIRouter

from app.api.errors import to_http_exception
from app.plans.errors import PlanError
from app.users.profile_service import ProfileUpdate, ProfileView, get_profile, update_profile

router = APIRouter(prefix="/api/users/{user_id}/profile", tags=["profile"])


@router.get("", response_model=ProfileView)
def read_profile(user_id: int) -> ProfileView:
    try:
        return get_profile(user_id)
    except PlanError as e:
        raise to_http_exception(e) from e


@router.patch("", response_model=ProfileView)
def patch_profile(user_id: int, request: ProfileUpdate) -> ProfileView:
    """Partially update the profile.

    Changing aim or difficult affects the next plan generation only.
    """
    try:
        return update_profile(user_id, request)
    except PlanError as e:
        raise to_http_exception(e) from e
