"""
Time arithmetic helpers for HH:MM strings.

All times are minutes since midnight once parsed. Hours and minutes are not
range-checked: "25:90" parses to 1590 minutes, and formatting wraps modulo a
day, so a period running past midnight comes back as an early-morning time.
"""

import re
from typing import Tuple

from .errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')


def to_minutes(time_str: str) -> int:
    """Convert an HH:MM string to minutes since midnight."""
    if not isinstance(time_str, str):
        raise InvalidTimeFormat(time_str)

    match = TIME_PATTERN.match(time_str.strip())
    if not match:
        raise InvalidTimeFormat(time_str)

    hours, minutes = match.groups()
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded HH:MM string."""
    minutes %= MINUTES_PER_DAY
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def normalize_time(time_str: str) -> str:
    """Return the canonical zero-padded form, e.g. '8:05' -> '08:05'."""
    return format_time(to_minutes(time_str))


def add_minutes(time_str: str, delta: int) -> str:
    """Add (or subtract) minutes to a time, wrapping around midnight."""
    return format_time(to_minutes(time_str) + delta)


def duration_between(start: str, end: str) -> int:
    """Minutes from start to end; negative if end is earlier."""
    return to_minutes(end) - to_minutes(start)


def interval_minutes(start: str, end: str) -> Tuple[int, int]:
    """Parse an interval; an end at or before its start lies on the next day."""
    start_minutes, end_minutes = to_minutes(start), to_minutes(end)
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY
    return start_minutes, end_minutes


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """
    Check whether two half-open intervals [start, end) intersect.

    Touching endpoints ('09:00'-'09:30' and '09:30'-'10:00') do not overlap.
    An interval running past midnight ('23:00'-'00:00') keeps its full length.
    """
    a_start, a_end = interval_minutes(start_a, end_a)
    b_start, b_end = interval_minutes(start_b, end_b)
    return a_start < b_end and b_start < a_end


def format_time_12_hour(time_str: str) -> str:
    """Format a time for display, e.g. '13:05' -> '1:05 PM'."""
    minutes = to_minutes(time_str) % MINUTES_PER_DAY
    hours, mins = divmod(minutes, 60)
    period = 'PM' if hours >= 12 else 'AM'
    hours_12 = hours % 12 or 12
    return f'{hours_12}:{mins:02d} {period}'
