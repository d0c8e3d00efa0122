"""Plans module - assignment and progress engine.

This module provides:
- Plan generation that replaces future incomplete assignments
- Calendar-day scoped completion marking
- Adherence statistics
- The denormalized schedule view
"""

from app.plans.completion import mark_done
from app.plans.errors import (
    AssignmentNotFoundError,
    InvalidPlanRequestError,
    NoEligibleWorkoutsError,
    PlanError,
    StoreFailureError,
    UserNotFoundError,
)
from app.plans.schedule_reader import get_schedule
from app.plans.scheduler import generate_plan
from app.plans.stats import get_stats
from app.plans.types import AssignmentView, ExerciseView, StatsView

__all__ = [
    "AssignmentNotFoundError",
    "AssignmentView",
    "ExerciseView",
    "InvalidPlanRequestError",
    "NoEligibleWorkoutsError",
    "PlanError",
    "StatsView",
    "StoreFailureError",
    "UserNotFoundError",
    "generate_plan",
    "get_schedule",
    "get_stats",
    "mark_done",
]
