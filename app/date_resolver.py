"""Map a weekday name and week offset onto a calendar date."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="date_resolver")

WEEKDAYS = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
_WEEKDAY_INDEX = {name.lower(): i for i, name in enumerate(WEEKDAYS)}


def weekday_index(name: str) -> int:
    """Sunday-based index (Sunday=0) of an English weekday name, case-insensitive."""
    try:
        return _WEEKDAY_INDEX[str(name).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown weekday name: {name!r}") from None


def _sunday_based(day: dt.date) -> int:
    # date.weekday() is Monday=0
    return (day.weekday() + 1) % 7


def resolve_date(weekday_name: str, week_offset: int = 0, *, today: Optional[dt.date] = None) -> str:
    """
    Return the ISO date of the next occurrence of `weekday_name`, shifted by `week_offset` weeks.

    Today counts as the next occurrence when it already matches, so a negative
    offset from a matching day moves a whole week back rather than to today.
    """
    today = today or dt.date.today()
    delta = (weekday_index(weekday_name) - _sunday_based(today) + 7) % 7 + week_offset * 7
    target = today + dt.timedelta(days=delta)
    logger.debug(
        "Resolved weekday to date",
        extra={"weekday": weekday_name, "week_offset": week_offset, "date": target.isoformat()},
    )
    return target.isoformat()
