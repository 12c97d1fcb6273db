"""Calendar-date helpers shared by the ledger, phase calculator and events.

Everything here works at day granularity on local wall-clock dates.  A
``datetime`` passed in is reduced to its calendar date first, so two
timestamps on the same day always compare equal regardless of time-of-day.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator

from cyclegarden.engine.errors import ValidationError

ONE_DAY = timedelta(days=1)


def day_of(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Return the number of whole calendar days from ``start`` to ``end``.

    Negative when ``end`` precedes ``start``.
    """
    return (day_of(end) - day_of(start)).days


def is_same_day(a: date | datetime | None, b: date | datetime | None) -> bool:
    if a is None or b is None:
        return False
    return day_of(a) == day_of(b)


def is_next_day(previous: date | datetime | None, current: date | datetime) -> bool:
    """True if ``current`` is the calendar day right after ``previous``."""
    if previous is None:
        return False
    return days_between(previous, current) == 1


def month_span(year: int, month: int) -> tuple[date, date]:
    """Return the first and last date of a calendar month.

    Raises:
        ValidationError: If ``month`` is not 1–12.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def dates_strictly_between(start: date, end: date) -> Iterator[date]:
    """Yield every date in the open interval (start, end), ascending."""
    current = start + ONE_DAY
    while current < end:
        yield current
        current += ONE_DAY


def date_key(day: date) -> str:
    """ISO-8601 key used when a ledger is persisted."""
    return day.isoformat()


def parse_date_key(text: str) -> date:
    """Parse an ISO-8601 date key.

    Raises:
        ValidationError: If the text is not a YYYY-MM-DD date.
    """
    try:
        return date.fromisoformat(text)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid calendar date: {text!r}") from exc
