"""
Timetable Generator Module
Places subjects into the free periods of each working day around the fixed
morning break and lunch, honouring teacher/subject constraints on a
best-effort basis.
"""

import logging
import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .distribution import distribute_across_days, periods_per_day, plan_positions, round_robin
from .errors import InvalidSubject
from .schedule_types import (
    BREAK_MARKER,
    LUNCH_MARKER,
    ConstraintData,
    DaySchedule,
    SettingsData,
    SubjectData,
    TimeSlot,
    TimetableEntry,
    TimetableResult,
)
from .slot_generator import generate_slots, open_intervals, remove_overlapping
from .time_utils import format_time

logger = logging.getLogger(__name__)

TieBreak = Callable[[Sequence[SubjectData]], SubjectData]


def first_candidate(candidates: Sequence[SubjectData]) -> SubjectData:
    """Deterministic tie-break: keep the rotation order."""
    return candidates[0]


class SeededTieBreak:
    """Uniform random tie-break, reproducible for a given seed."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def __call__(self, candidates: Sequence[SubjectData]) -> SubjectData:
        return self._random.choice(list(candidates))


@dataclass
class DayPlan:
    """Working state for one day while a generation call runs."""
    index: int
    schedule: DaySchedule
    fixed: List[TimeSlot]
    slots: List[TimeSlot]
    usable: List[Tuple[int, TimeSlot]] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.schedule.day


class QuotaStrategy:
    """
    Fill every usable period from the even-stride distribution plan.

    Positions the plan leaves empty go to ``position % len(subjects)`` among
    subjects with a positive quota, so no usable period stays blank. Before
    placement the plan is adjusted by swapping positions: first off slots a
    subject is unavailable for, then prefer-morning subjects into the same
    day's morning.
    """

    name = 'quota'

    def place(self, generator: 'TimetableGenerator', days: List[DayPlan]) -> List[str]:
        slots_per_day = len(days[0].slots) if days else 0
        eligible = [s for s in generator.subjects if s.quota > 0]
        by_id = {s.id: s for s in eligible}

        usable_positions = [day.index * slots_per_day + i for day in days for i, _ in day.usable]
        plan = plan_positions(eligible, usable_positions)
        plan = self._avoid_unavailable(generator, days, plan, slots_per_day, by_id)
        plan = self._prefer_mornings(generator, days, plan, slots_per_day, by_id)

        placed = Counter()
        for day in days:
            previous = None
            for slot_index, slot in day.usable:
                position = day.index * slots_per_day + slot_index
                primary = by_id.get(plan.get(position)) or round_robin(position, eligible)
                if primary is None:
                    continue

                rotation = self._rotation(eligible, primary)
                subject = generator.choose(
                    rotation, day.name, lambda s: slot, previous,
                    preferred=lambda s: placed[s.id] < s.quota,
                )
                day.schedule.entries.append(TimetableEntry(subject=subject, time=slot))
                placed[subject.id] += 1
                previous = subject

        generator.statistics['planned_per_day'] = {
            str(k): v for k, v in periods_per_day(plan, slots_per_day, len(days)).items()
        }
        generator.statistics['even_split_per_day'] = {
            str(k): v for k, v in distribute_across_days(eligible, len(days)).items()
        }

        warnings = []
        for subject in eligible:
            short = subject.quota - placed[subject.id]
            if short > 0:
                warnings.append(
                    f"Could not schedule all periods for {subject.name}: "
                    f"placed {placed[subject.id]} of {subject.quota} ({short} short)"
                )

        # Duration-only subjects have no weekly quota to place
        for subject in generator.subjects:
            if subject.periods_per_week is None:
                logger.warning("Skipping %s: quota strategy needs periods_per_week", subject.name)
                warnings.append(
                    f"Could not schedule {subject.name}: no weekly period quota "
                    f"({subject.duration} min sessions need the duration strategy)"
                )
        return warnings

    @staticmethod
    def _rotation(eligible: List[SubjectData], primary: SubjectData) -> List[SubjectData]:
        start = eligible.index(primary)
        return [primary] + eligible[start + 1:] + eligible[:start]

    @staticmethod
    def _swap(plan, position, other_position, subject, other):
        plan[other_position] = subject.id
        if other is None:
            del plan[position]
        else:
            plan[position] = other.id

    @classmethod
    def _avoid_unavailable(cls, generator, days, plan, slots_per_day, by_id):
        """Move planned periods off slots their subject is unavailable for."""
        if not any(c.unavailable_slots for c in generator.constraints):
            return plan

        slot_at = {
            day.index * slots_per_day + slot_index: (day.name, slot)
            for day in days for slot_index, slot in day.usable
        }
        plan = dict(plan)
        for position, (day_name, slot) in slot_at.items():
            subject = by_id.get(plan.get(position))
            if subject is None or not generator.is_blocked(subject, day_name, slot):
                continue

            for other_position, (other_day, other_slot) in slot_at.items():
                other = by_id.get(plan.get(other_position))
                if other is not None and other.id == subject.id:
                    continue
                if generator.is_blocked(subject, other_day, other_slot):
                    continue
                if other is not None and generator.is_blocked(other, day_name, slot):
                    continue
                cls._swap(plan, position, other_position, subject, other)
                break
        return plan

    @classmethod
    def _prefer_mornings(cls, generator, days, plan, slots_per_day, by_id):
        """Swap prefer-morning subjects out of afternoon positions on the same day."""
        if not any(generator.prefers_morning(s) for s in by_id.values()):
            return plan

        lunch_start = generator.settings.lunch_slot.start_minutes
        plan = dict(plan)
        for day in days:
            morning, afternoon = [], []
            for slot_index, slot in day.usable:
                bucket = morning if slot.end_minutes <= lunch_start else afternoon
                bucket.append((day.index * slots_per_day + slot_index, slot))

            for position, slot in afternoon:
                subject = by_id.get(plan.get(position))
                if subject is None or not generator.prefers_morning(subject):
                    continue

                for morning_position, morning_slot in morning:
                    other = by_id.get(plan.get(morning_position))
                    if other is not None and generator.prefers_morning(other):
                        continue
                    if generator.is_blocked(subject, day.name, morning_slot):
                        continue
                    if other is not None and generator.is_blocked(other, day.name, slot):
                        continue

                    cls._swap(plan, position, morning_position, subject, other)
                    break
        return plan


class DurationStrategy:
    """
    Fill the open gaps of each day with single sessions of fixed length.

    Subjects are taken from a queue: the first one whose duration fits the
    rest of the gap is placed; when nothing fits the gap is skipped. In daily
    mode a placed subject leaves the queue for good. In weekly mode every
    subject stays queued (at most one session per day) until the final day.
    Subjects with an explicit weekly quota of 0 are never queued.
    """

    name = 'duration'

    def place(self, generator: 'TimetableGenerator', days: List[DayPlan]) -> List[str]:
        settings = generator.settings
        weekly = settings.schedule_type == 'weekly'
        queue = [s for s in generator.subjects if s.duration and s.periods_per_week != 0]
        missed = defaultdict(list)

        for day in days:
            placed_today = set()
            previous = None
            for gap_start, gap_end in open_intervals(settings.start_time, settings.end_time, day.fixed):
                cursor = gap_start
                while True:
                    fitting = [s for s in queue
                               if s.id not in placed_today and s.duration <= gap_end - cursor]
                    if not fitting:
                        break

                    def slot_for(subject, start=cursor):
                        return TimeSlot(format_time(start), format_time(start + subject.duration))

                    subject = generator.choose(fitting, day.name, slot_for, previous)
                    day.schedule.entries.append(TimetableEntry(subject=subject, time=slot_for(subject)))
                    placed_today.add(subject.id)
                    if not weekly:
                        queue.remove(subject)
                    cursor += subject.duration
                    previous = subject

            if weekly:
                for subject in queue:
                    if subject.id not in placed_today:
                        missed[subject.id].append(day.name)

        if weekly:
            return [
                f"Could not schedule {s.name} ({s.duration} min) on {', '.join(missed[s.id])}"
                for s in queue if missed[s.id]
            ]
        return [f"Could not schedule {s.name}: no free gap of {s.duration} minutes" for s in queue]


STRATEGIES = {
    QuotaStrategy.name: QuotaStrategy,
    DurationStrategy.name: DurationStrategy,
}

Strategy = Union[QuotaStrategy, DurationStrategy]


def choose_strategy(subjects: Iterable[SubjectData]) -> Strategy:
    """Quota-based when any subject has a weekly quota, else duration-based."""
    subjects = list(subjects)
    if subjects and all(s.is_duration_based for s in subjects):
        return DurationStrategy()
    return QuotaStrategy()


class TimetableGenerator:
    """
    Builds one week's timetable from settings, subjects and constraints.

    A generator instance holds the state of a single call; create a new one
    for every generation. Input errors are raised while the inputs are built
    (see ``SettingsData.from_dict``); scheduling shortfalls never raise and
    are reported in ``TimetableResult.warnings``.
    """

    def __init__(self, settings: SettingsData, subjects: Sequence[SubjectData],
                 constraints: Optional[Sequence[ConstraintData]] = None,
                 tie_break: Optional[TieBreak] = None,
                 strategy: Union[str, Strategy, None] = None):
        self.settings = settings
        self.subjects = list(subjects)
        self._check_ids()
        self.constraints = list(constraints or [])
        self.tie_break = tie_break or first_candidate
        if isinstance(strategy, str):
            strategy = STRATEGIES[strategy]()
        self.strategy = strategy or choose_strategy(self.subjects)
        self.statistics: Dict[str, Any] = {}

        self._constraints_for: Dict[Any, List[ConstraintData]] = {
            s.id: [c for c in self.constraints if c.applies_to(s)] for s in self.subjects
        }

    def _check_ids(self):
        seen = set()
        for subject in self.subjects:
            if subject.id is None:
                raise InvalidSubject(f"Subject {subject.name!r} has no id")
            if subject.id in seen:
                raise InvalidSubject(f"Duplicate subject id {subject.id!r}")
            seen.add(subject.id)

    def generate(self) -> TimetableResult:
        days = [self._build_day(index, name) for index, name in enumerate(self.settings.working_days)]

        warnings = []
        if not self.subjects:
            logger.info("No subjects to schedule; returning break and lunch only")
        else:
            logger.info("Generating %s-based timetable: %d subjects over %d days",
                        self.strategy.name, len(self.subjects), len(days))
            warnings = self.strategy.place(self, days)

        for day in days:
            day.schedule.entries.sort(key=lambda e: e.time.start_minutes)

        self._collect_statistics(days)
        if warnings:
            logger.warning("Timetable generated with %d unscheduled subject(s)", len(warnings))

        return TimetableResult(
            days=[day.schedule for day in days],
            settings=self.settings,
            warnings=warnings,
            strategy=self.strategy.name,
            statistics=self.statistics,
        )

    def _build_day(self, index: int, name: str) -> DayPlan:
        settings = self.settings
        fixed = [settings.break_slot, settings.lunch_slot]
        schedule = DaySchedule(day=name, entries=[
            TimetableEntry(subject=BREAK_MARKER, time=settings.break_slot, type='break'),
            TimetableEntry(subject=LUNCH_MARKER, time=settings.lunch_slot, type='lunch'),
        ])
        slots = generate_slots(settings.start_time, settings.end_time, settings.period_duration)
        return DayPlan(index=index, schedule=schedule, fixed=fixed, slots=slots,
                       usable=remove_overlapping(slots, fixed))

    # Constraint checks

    def is_blocked(self, subject: SubjectData, day: str, slot: TimeSlot) -> bool:
        return any(c.blocks(day, slot) for c in self._constraints_for.get(subject.id, ()))

    def prefers_morning(self, subject: SubjectData) -> bool:
        return any(c.prefer_morning for c in self._constraints_for.get(subject.id, ()))

    def avoids_consecutive(self, subject: SubjectData) -> bool:
        return any(c.avoid_consecutive for c in self._constraints_for.get(subject.id, ()))

    def violates(self, subject: SubjectData, day: str, slot: TimeSlot,
                 previous: Optional[SubjectData]) -> bool:
        if self.is_blocked(subject, day, slot):
            return True
        return (previous is not None and previous.id == subject.id
                and self.avoids_consecutive(subject))

    def choose(self, candidates: Sequence[SubjectData], day: str,
               slot_for: Callable[[SubjectData], TimeSlot],
               previous: Optional[SubjectData],
               preferred: Optional[Callable[[SubjectData], bool]] = None) -> SubjectData:
        """
        Pick the subject for a slot, skipping candidates that break a constraint.

        ``candidates[0]`` is the planned subject. If it is blocked, the
        remaining candidates that pass are narrowed to ``preferred`` ones
        (when any) and handed to the tie-break. If none pass, the planned
        subject is placed anyway.
        """
        primary = candidates[0]
        if not self.violates(primary, day, slot_for(primary), previous):
            return primary

        passing = [c for c in candidates[1:] if not self.violates(c, day, slot_for(c), previous)]
        if not passing:
            logger.debug("No constraint-free subject for %s %s; keeping %s",
                         day, slot_for(primary).start, primary.name)
            return primary

        if preferred is not None:
            passing = [c for c in passing if preferred(c)] or passing
        return self.tie_break(passing)

    def _collect_statistics(self, days: List[DayPlan]):
        by_subject = Counter()
        by_day = {}
        teaching_minutes = 0
        for day in days:
            classes = day.schedule.class_entries()
            by_day[day.name] = len(classes)
            for entry in classes:
                by_subject[str(entry.subject.id)] += 1
                teaching_minutes += entry.time.end_minutes - entry.time.start_minutes

        self.statistics.update({
            'total_classes': sum(by_day.values()),
            'classes_by_day': by_day,
            'classes_by_subject': dict(by_subject),
            'teaching_minutes': teaching_minutes,
            'break_minutes': self.settings.break_duration * len(days),
            'lunch_minutes': self.settings.lunch_duration * len(days),
        })


def generate_timetable(settings: SettingsData, subjects: Sequence[SubjectData],
                       constraints: Optional[Sequence[ConstraintData]] = None,
                       seed: Optional[int] = None,
                       strategy: Union[str, Strategy, None] = None) -> TimetableResult:
    """
    Generate a timetable in one call.

    Args:
        settings: validated working envelope
        subjects: subjects to place; empty yields break/lunch only
        constraints: advisory constraints
        seed: when given, ties are broken by a seeded random choice
        strategy: 'quota' or 'duration' to override auto-detection

    Returns:
        TimetableResult with sorted days and unscheduled-subject warnings
    """
    tie_break = SeededTieBreak(seed) if seed is not None else None
    return TimetableGenerator(settings, subjects, constraints,
                              tie_break=tie_break, strategy=strategy).generate()
