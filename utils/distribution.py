"""
Distribution planner: spreads each subject's weekly quota over the week.

A week is a linear space of positions, ``day_index * slots_per_day +
slot_index``. The planner hands out positions with an even stride so a
subject's periods land on different days where possible.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .schedule_types import SubjectData


def _without(pool: Tuple[int, ...], index: int) -> Tuple[int, ...]:
    return pool[:index] + pool[index + 1:]


def plan_positions(subjects: Sequence[SubjectData],
                   positions: Optional[Iterable[int]] = None,
                   total_positions: Optional[int] = None) -> Dict[int, object]:
    """
    Assign week positions to subjects by even-stride placement.

    Subjects with larger quotas choose first (stable for equal quotas). Each
    subject takes ``k = min(quota, len(pool))`` positions at indices
    ``0, stride, 2*stride, ...`` of the pool, where ``stride`` is fixed from
    the pool size at the start of its turn. The pool shrinks after every pick,
    so later picks drift slightly; spreading is approximate, not uniform.

    Args:
        subjects: quota-based subjects
        positions: candidate positions in order (default ``range(total_positions)``)
        total_positions: size of the week when ``positions`` is omitted

    Returns:
        Mapping of position -> subject id. Shortfalls are silently truncated.
    """
    if positions is None:
        positions = range(total_positions or 0)
    pool = tuple(positions)

    assignment = {}
    for subject in sorted(subjects, key=lambda s: s.quota, reverse=True):
        k = min(subject.quota, len(pool))
        if k == 0:
            continue

        stride = len(pool) // k
        for i in range(k):
            index = min(i * stride, len(pool) - 1)
            assignment[pool[index]] = subject.id
            pool = _without(pool, index)

    return assignment


def round_robin(position: int, subjects: Sequence[SubjectData]) -> Optional[SubjectData]:
    """Fallback pick for a position no subject was planned into."""
    if not subjects:
        return None
    return subjects[position % len(subjects)]


def distribute_across_days(subjects: Sequence[SubjectData], num_days: int) -> Dict[object, List[int]]:
    """Spread each subject's quota over the days one period at a time."""
    distribution = {}
    for subject in subjects:
        per_day = [0] * num_days
        if num_days:
            for n in range(subject.quota):
                per_day[n % num_days] += 1
        distribution[subject.id] = per_day
    return distribution


def periods_per_day(plan: Dict[int, object], slots_per_day: int, num_days: int) -> Dict[object, List[int]]:
    """Count planned periods per subject per day."""
    counts = {}
    for position, subject_id in plan.items():
        day_index = position // slots_per_day if slots_per_day else 0
        if day_index >= num_days:
            continue
        counts.setdefault(subject_id, [0] * num_days)[day_index] += 1
    return counts
