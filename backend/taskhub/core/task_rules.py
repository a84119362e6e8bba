"""Task Business Rules — checks that hold at the moment of a write.

Invariants:
    - A due date, when set, is strictly later than `now`
    - Naive datetimes are treated as UTC
"""

from datetime import datetime, timezone

from taskhub.core.errors import BadRequestError


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def check_due_date_in_future(
    due_date: datetime | None, now: datetime,
) -> None:
    """Raise BadRequestError unless due_date is None or after now."""
    if due_date is None:
        return
    if as_utc(due_date) <= as_utc(now):
        raise BadRequestError(
            "Due date must be in the future", field="due_date",
        )
