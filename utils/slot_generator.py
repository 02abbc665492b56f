"""Candidate period slots for a working day."""

from typing import Iterable, List, Tuple

from .errors import InvalidSettings
from .schedule_types import TimeSlot
from .time_utils import format_time, overlaps, to_minutes


def generate_slots(day_start: str, day_end: str, period_duration: int) -> List[TimeSlot]:
    """
    Split a working day into back-to-back periods.

    The last period may run past ``day_end``; it is kept rather than clipped
    and callers filter it against fixed entries like any other slot.

    Args:
        day_start: first period start, HH:MM
        day_end: no period starts at or after this time
        period_duration: minutes per period

    Returns:
        Slots in start-time order
    """
    if period_duration <= 0:
        raise InvalidSettings('Period duration must be positive')

    cursor = to_minutes(day_start)
    end = to_minutes(day_end)

    slots = []
    while cursor < end:
        next_cursor = cursor + period_duration
        slots.append(TimeSlot(format_time(cursor), format_time(next_cursor)))
        cursor = next_cursor
    return slots


def remove_overlapping(slots: Iterable[TimeSlot], fixed: Iterable[TimeSlot]) -> List[Tuple[int, TimeSlot]]:
    """Keep (index, slot) pairs for slots that do not overlap any fixed window."""
    fixed = list(fixed)
    return [
        (index, slot) for index, slot in enumerate(slots)
        if not any(overlaps(slot.start, slot.end, f.start, f.end) for f in fixed)
    ]


def open_intervals(day_start: str, day_end: str, fixed: Iterable[TimeSlot]) -> List[Tuple[int, int]]:
    """
    Gaps of the working day not covered by fixed windows, in minutes.

    Fixed windows outside the day are ignored; overlapping windows merge.
    """
    start, end = to_minutes(day_start), to_minutes(day_end)
    blocked = sorted(
        (max(f.start_minutes, start), min(f.end_minutes, end))
        for f in fixed
        if f.start_minutes < end and f.end_minutes > start
    )

    gaps = []
    cursor = start
    for block_start, block_end in blocked:
        if block_start > cursor:
            gaps.append((cursor, block_start))
        cursor = max(cursor, block_end)
    if cursor < end:
        gaps.append((cursor, end))
    return gaps
