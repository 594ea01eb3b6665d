"""
Helpers for the fixed-width ``HH:MM`` times used by schedules and bookings.

Times are kept as zero-padded strings so that lexicographic order equals
chronological order; arithmetic goes through minutes since midnight.
"""
import re
from datetime import date, datetime
from typing import Union

from app.core.exceptions import InvalidInputError
from app.models.court import Weekday

# 00:00-23:59 only; a window can close at 23:59 at the latest
_HHMM = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MINUTES_PER_DAY = 24 * 60

# date.weekday(): Monday == 0
_WEEKDAYS = list(Weekday)


def is_valid_hhmm(value: str) -> bool:
    return isinstance(value, str) and bool(_HHMM.match(value))


def to_minutes(value: str) -> int:
    """'06:30' -> 390. Raises InvalidInputError for anything not HH:MM."""
    if not is_valid_hhmm(value):
        raise InvalidInputError(f"Invalid time '{value}'. Use HH:MM format.")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    """390 -> '06:30'. Only defined within a single day."""
    if not 0 <= total < MINUTES_PER_DAY:
        raise ValueError(f"{total} minutes is outside a single day")
    return f"{total // 60:02d}:{total % 60:02d}"


def minutes_between(start: str, end: str) -> int:
    return to_minutes(end) - to_minutes(start)


def parse_booking_date(value: Union[date, str]) -> date:
    """Accept a date (time-of-day stripped) or an ISO 'YYYY-MM-DD' string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not _ISO_DATE.match(text):
        raise InvalidInputError(f"Invalid date '{value}'. Use YYYY-MM-DD format.")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidInputError(f"Invalid date '{value}'. Use YYYY-MM-DD format.")


def weekday_of(day: date) -> Weekday:
    return _WEEKDAYS[day.weekday()]


def intervals_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Half-open [start, end) overlap; touching intervals do not overlap."""
    return a_start < b_end and b_start < a_end


def starts_after(day: date, start_time: str, now: datetime) -> bool:
    """True if day+start_time is strictly later than ``now`` (naive local time)."""
    hours, minutes = divmod(to_minutes(start_time), 60)
    starts_at = datetime(day.year, day.month, day.day, hours, minutes)
    return starts_at > now
