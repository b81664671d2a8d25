"""Clock-time arithmetic for shifts that may cross midnight.

Times are "HH:MM" strings on a 24-hour clock. A range whose end is earlier
than its start wraps past midnight and belongs to the day it starts on.
All overlap and containment rules used by availability, conflict and
coverage checks live here so they cannot drift apart.
"""

import re
from datetime import date

MINUTES_PER_DAY = 24 * 60

DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class InvalidTimeError(ValueError):
    """Raised when a clock time is not a valid "HH:MM" string."""


def to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes past midnight.

    Raises:
        InvalidTimeError: If the string is malformed or out of range.
    """
    if not isinstance(value, str):
        raise InvalidTimeError(f"Expected 'HH:MM' string, got {value!r}")
    match = _TIME_PATTERN.match(value.strip())
    if match is None:
        raise InvalidTimeError(f"Malformed time {value!r}, expected 'HH:MM'")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(f"Time {value!r} is out of range")
    return hours * 60 + minutes


def from_minutes(minutes: int) -> str:
    """Format minutes past midnight as "HH:MM", wrapping at 24:00."""
    hours, mins = divmod(minutes % MINUTES_PER_DAY, 60)
    return f"{hours:02d}:{mins:02d}"


def crosses_midnight(start: str, end: str) -> bool:
    return to_minutes(end) < to_minutes(start)


def duration_minutes(start: str, end: str) -> int:
    """Length of a range in minutes; equal endpoints give zero."""
    start_m, end_m = to_minutes(start), to_minutes(end)
    if end_m >= start_m:
        return end_m - start_m
    return MINUTES_PER_DAY - start_m + end_m


def duration(start: str, end: str) -> float:
    """Length of a range in hours, full precision."""
    return duration_minutes(start, end) / 60.0


def round_hours(hours: float) -> float:
    """Round hours to one decimal for display."""
    return round(hours, 1)


def add_hours(value: str, hours: float) -> str:
    """Shift a clock time by a number of hours, wrapping modulo 24:00."""
    return from_minutes(to_minutes(value) + round(hours * 60))


def covers(start: str, end: str, moment: str) -> bool:
    """Check whether a half-open range [start, end) contains a clock time."""
    start_m, end_m, t = to_minutes(start), to_minutes(end), to_minutes(moment)
    if end_m < start_m:
        return t >= start_m or t < end_m
    return start_m <= t < end_m


def ranges_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Check whether two half-open clock ranges on the same day overlap.

    A wrapping range is the union of [start, 24:00) and [00:00, end). Two
    wrapping ranges both contain midnight, so they always overlap. When
    exactly one wraps, the plain range overlaps if it reaches into either
    half of the wrapping one.
    """
    sa, ea = to_minutes(start_a), to_minutes(end_a)
    sb, eb = to_minutes(start_b), to_minutes(end_b)
    wraps_a = ea < sa
    wraps_b = eb < sb

    if wraps_a and wraps_b:
        return True
    if wraps_a:
        return sb < ea or eb > sa
    if wraps_b:
        return sa < eb or ea > sb
    return sa < eb and sb < ea


def is_within_operating_hours(moment: str, opening: str, closing: str) -> bool:
    """Check a clock time against an opening window, both ends inclusive.

    The window wraps past midnight when closing is earlier than opening.
    """
    t = to_minutes(moment)
    open_m, close_m = to_minutes(opening), to_minutes(closing)
    if close_m < open_m:
        return t >= open_m or t <= close_m
    return open_m <= t <= close_m


def day_index(value: date) -> int:
    """Index of a calendar date in the Monday-first week."""
    return value.weekday()


def day_name(index: int) -> str:
    if not 0 <= index <= 6:
        raise ValueError(f"Day index must be 0..6, got {index}")
    return DAY_NAMES[index]
