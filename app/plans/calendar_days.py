"""Calendar-day helpers shared by the scheduler and the completion tracker.

Ledger dates are naive UTC datetimes pinned to midnight.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from app.plans.errors import InvalidPlanRequestError


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the ledger's representation)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) range covering one calendar day."""
    start = start_of_day(day)
    return start, start + timedelta(days=1)


def to_calendar_day(value: date | datetime | str) -> date:
    """Strip time-of-day from a date, datetime or ISO-8601 string.

    The day is the one written in the value; an offset never moves it.

    Raises:
        InvalidPlanRequestError: If the string is not ISO-8601
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidPlanRequestError(f"Invalid date: {value!r}") from e
    if isinstance(value, datetime):
        return value.date()
    return value
