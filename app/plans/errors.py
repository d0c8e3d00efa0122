"""Error types for the plan engine.

Business errors (PlanError subclasses other than StoreFailureError) are
expected outcomes that callers translate into client-facing responses.
They must not be logged as database errors.
"""


class PlanError(Exception):
    """Base class for every error raised by the plan engine."""


class UserNotFoundError(PlanError):
    """Raised when the user does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User not found: user_id={user_id}")
        self.user_id = user_id


class NoEligibleWorkoutsError(PlanError):
    """Raised when no catalog template matches the user's aim and difficulty.

    This is a legitimate empty result, not an internal fault.
    """

    def __init__(self, aim: int, difficult: int) -> None:
        super().__init__(f"No suitable workouts found for aim={aim}, difficult={difficult}")
        self.aim = aim
        self.difficult = difficult


class AssignmentNotFoundError(PlanError):
    """Raised when no assignment matches (user, workout, calendar day)."""

    def __init__(self, user_id: int, workout_id: int, day: object) -> None:
        super().__init__(f"Workout not found for user_id={user_id}, workout_id={workout_id}, date={day}")
        self.user_id = user_id
        self.workout_id = workout_id
        self.day = day


class InvalidPlanRequestError(PlanError, ValueError):
    """Raised when plan parameters are out of range or unparseable."""


class StoreFailureError(PlanError):
    """Raised when the underlying store fails.

    The transaction has always been rolled back by the time this is raised.
    The original SQLAlchemy error is chained as __cause__.
    """
