"""Translation of plan engine errors into HTTP responses."""

from fastapi import HTTPException, status
from loguru import logger

from app.plans.errors import (
    AssignmentNotFoundError,
    InvalidPlanRequestError,
    NoEligibleWorkoutsError,
    PlanError,
    StoreFailureError,
    UserNotFoundError,
)


def to_http_exception(error: PlanError) -> HTTPException:
    """Map a PlanError to the HTTPException the client should see.

    Store failures get an opaque body; the cause is only logged.
    """
    if isinstance(error, UserNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    if isinstance(error, NoEligibleWorkoutsError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No suitable workouts found for your level/aim",
        )
    if isinstance(error, AssignmentNotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="workout not found for the given user and date",
        )
    if isinstance(error, InvalidPlanRequestError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    if isinstance(error, StoreFailureError):
        logger.error(f"Store failure surfaced to client: {error}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="internal error")
