"""Calendar helpers shared by models and services.

Weekday indices follow the PMS convention: 0=Sunday .. 6=Saturday.
"""

from datetime import date, datetime, timedelta
from typing import Any, Iterator

WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def day_of_week(day: date) -> int:
    """Return the weekday index of a date with Sunday as 0."""
    return (day.weekday() + 1) % 7


def day_name(day: date) -> str:
    """Return the English weekday name of a date."""
    return WEEKDAY_NAMES[day_of_week(day)]


def parse_iso_date(value: Any) -> date:
    """Parse an ISO date or datetime into a calendar date.

    Accepts ``date`` and ``datetime`` objects as well as strings such as
    ``"2024-12-20"`` or ``"2024-12-20T00:00:00.000Z"``. Datetimes are truncated
    to their date.

    Args:
        value: Value to parse

    Returns:
        The calendar date

    Raises:
        ValueError: If the value is not a recognizable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date value: {value!r}")

    text = value.strip()
    try:
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid date value: {value!r}") from e


def iter_nights(start: date, end: date) -> Iterator[date]:
    """Yield every night in the half-open interval [start, end)."""
    current = start
    while current < end:
        yield current
        current += timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in the closed interval [start, end]."""
    return iter_nights(start, end + timedelta(days=1))


def intervals_overlap(
    first_start: date,
    first_end: date,
    second_start: date,
    second_end: date,
) -> bool:
    """Half-open interval intersection.

    A stay ending on day D and another starting on day D do not overlap.
    """
    return first_start < second_end and first_end > second_start


def night_count(start: date, end: date) -> int:
    """Number of nights between two dates."""
    return (end - start).days
