"""
Plain value types consumed and produced by the timetable generator.

These are deliberately independent of the database models: routes convert
model ``to_dict()`` output with ``from_dict`` before calling the generator,
and store ``TimetableResult.to_dict()`` back as JSON.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .errors import InvalidConstraint, InvalidSettings, InvalidSubject
from .time_utils import add_minutes, interval_minutes, normalize_time, to_minutes

logger = logging.getLogger(__name__)

SCHEDULE_TYPES = ('daily', 'weekly')

FIXED_ENTRY_COLOR = '#F59E0B'


@dataclass(frozen=True)
class TimeSlot:
    """Half-open [start, end) interval within a day."""
    start: str
    end: str

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return interval_minutes(self.start, self.end)[1]

    def to_dict(self):
        return {'start': self.start, 'end': self.end}


@dataclass(frozen=True)
class SubjectData:
    """A subject to place, either quota-based or duration-based."""
    id: Any
    name: str
    code: Optional[str] = None
    teacher: Optional[str] = None
    periods_per_week: Optional[int] = None
    duration: Optional[int] = None
    color: Optional[str] = None
    room: Optional[str] = None

    @property
    def quota(self) -> int:
        return self.periods_per_week or 0

    @property
    def is_duration_based(self) -> bool:
        return self.periods_per_week is None and self.duration is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], require_id: bool = True) -> 'SubjectData':
        """
        Validate a subject record.

        ``require_id`` is only relaxed for records that have not been stored
        yet; the generator keys placements by id.
        """
        name = (data.get('name') or '').strip()
        if not name:
            raise InvalidSubject('Subject name is required')
        if require_id and data.get('id') is None:
            raise InvalidSubject(f"Subject {name!r} has no id")

        periods = data.get('periods_per_week', data.get('periodsPerWeek'))
        duration = data.get('duration')
        try:
            periods = int(periods) if periods is not None else None
            duration = int(duration) if duration is not None else None
        except (TypeError, ValueError):
            raise InvalidSubject(f"Subject {name!r} has a non-numeric quota or duration")

        if periods is None and duration is None:
            raise InvalidSubject(f"Subject {name!r} needs periods_per_week or duration")
        if periods is not None and periods < 0:
            raise InvalidSubject(f"Subject {name!r} has a negative weekly quota")
        if duration is not None and duration <= 0:
            raise InvalidSubject(f"Subject {name!r} must have a positive duration")

        return cls(
            id=data.get('id'),
            name=name,
            code=data.get('code'),
            teacher=data.get('teacher'),
            periods_per_week=periods,
            duration=duration,
            color=data.get('color'),
            room=data.get('room'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'code': self.code,
            'teacher': self.teacher,
            'periods_per_week': self.periods_per_week,
            'duration': self.duration,
            'color': self.color,
            'room': self.room,
        }


BREAK_MARKER = SubjectData(id=0, name='Morning Break', teacher='', periods_per_week=0,
                           color=FIXED_ENTRY_COLOR)
LUNCH_MARKER = SubjectData(id=0, name='Lunch Break', teacher='', periods_per_week=0,
                           color=FIXED_ENTRY_COLOR)


def _get(data, snake, camel, default=None):
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _positive_int(value, label):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidSettings(f'{label} must be a whole number of minutes')
    if number <= 0:
        raise InvalidSettings(f'{label} must be positive')
    return number


@dataclass(frozen=True)
class SettingsData:
    """The working envelope for one generation call."""
    working_days: Tuple[str, ...]
    start_time: str
    end_time: str
    period_duration: int
    break_time: str
    break_duration: int
    lunch_time: str
    lunch_duration: int
    schedule_type: str = 'weekly'

    @property
    def break_slot(self) -> TimeSlot:
        return TimeSlot(self.break_time, add_minutes(self.break_time, self.break_duration))

    @property
    def lunch_slot(self) -> TimeSlot:
        return TimeSlot(self.lunch_time, add_minutes(self.lunch_time, self.lunch_duration))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SettingsData':
        """
        Validate and normalise a settings record.

        Raises:
            InvalidTimeFormat: if any time is not HH:MM
            InvalidSettings: for empty/duplicate days, end <= start or
                non-positive durations
        """
        days = _get(data, 'working_days', 'workingDays') or []
        if isinstance(days, str):
            days = [days]
        days = tuple(str(day).strip() for day in days if str(day).strip())
        if not days:
            raise InvalidSettings('At least one working day is required')
        if len(set(days)) != len(days):
            raise InvalidSettings('Working days must be unique')

        start_time = normalize_time(_get(data, 'start_time', 'startTime'))
        end_time = normalize_time(_get(data, 'end_time', 'endTime'))
        if to_minutes(end_time) <= to_minutes(start_time):
            raise InvalidSettings(f'End time {end_time} must be after start time {start_time}')

        schedule_type = _get(data, 'schedule_type', 'scheduleType') or 'weekly'
        if schedule_type not in SCHEDULE_TYPES:
            raise InvalidSettings(f'Unknown schedule type {schedule_type!r}')

        settings = cls(
            working_days=days,
            start_time=start_time,
            end_time=end_time,
            period_duration=_positive_int(_get(data, 'period_duration', 'periodDuration'),
                                          'Period duration'),
            break_time=normalize_time(_get(data, 'break_time', 'breakTime')),
            break_duration=_positive_int(_get(data, 'break_duration', 'breakDuration'),
                                         'Break duration'),
            lunch_time=normalize_time(_get(data, 'lunch_time', 'lunchTime')),
            lunch_duration=_positive_int(_get(data, 'lunch_duration', 'lunchDuration'),
                                         'Lunch duration'),
            schedule_type=schedule_type,
        )
        settings._warn_outside_day()
        return settings

    def _warn_outside_day(self):
        day_start, day_end = to_minutes(self.start_time), to_minutes(self.end_time)
        for label, window in (('Break', self.break_slot), ('Lunch', self.lunch_slot)):
            if not day_start <= window.start_minutes < day_end:
                logger.warning("%s window %s-%s lies outside the working day %s-%s",
                               label, window.start, window.end, self.start_time, self.end_time)

    def to_dict(self):
        return {
            'working_days': list(self.working_days),
            'start_time': self.start_time,
            'end_time': self.end_time,
            'period_duration': self.period_duration,
            'break_time': self.break_time,
            'break_duration': self.break_duration,
            'lunch_time': self.lunch_time,
            'lunch_duration': self.lunch_duration,
            'schedule_type': self.schedule_type,
        }


@dataclass(frozen=True)
class ConstraintData:
    """Advisory restriction scoped to a subject and/or a teacher."""
    subject_id: Any = None
    teacher: Optional[str] = None
    avoid_consecutive: bool = False
    prefer_morning: bool = False
    unavailable_slots: FrozenSet[Tuple[str, int]] = frozenset()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConstraintData':
        slots = set()
        for slot in _get(data, 'unavailable_slots', 'unavailableSlots') or []:
            try:
                day, time_str = slot['day'], slot['time']
            except (KeyError, TypeError):
                raise InvalidConstraint('Unavailable slots need a day and a time')
            slots.add((str(day), to_minutes(time_str)))

        teacher = next((data[key] for key in ('teacher', 'teacher_id', 'teacherId')
                        if data.get(key) not in (None, '')), None)
        return cls(
            subject_id=_get(data, 'subject_id', 'subjectId'),
            teacher=str(teacher) if teacher is not None else None,
            avoid_consecutive=bool(_get(data, 'avoid_consecutive', 'avoidConsecutive', False)),
            prefer_morning=bool(_get(data, 'prefer_morning', 'preferMorning', False)),
            unavailable_slots=frozenset(slots),
        )

    def applies_to(self, subject: SubjectData) -> bool:
        if self.subject_id is not None and str(self.subject_id) == str(subject.id):
            return True
        return (self.teacher is not None and subject.teacher is not None
                and self.teacher == str(subject.teacher))

    def blocks(self, day: str, slot: TimeSlot) -> bool:
        return (day, slot.start_minutes) in self.unavailable_slots


@dataclass
class TimetableEntry:
    subject: SubjectData
    time: TimeSlot
    type: str = 'class'

    def to_dict(self):
        return {
            'subject': self.subject.to_dict(),
            'time': self.time.to_dict(),
            'type': self.type,
        }


@dataclass
class DaySchedule:
    day: str
    entries: List[TimetableEntry] = field(default_factory=list)

    def class_entries(self) -> List[TimetableEntry]:
        return [e for e in self.entries if e.type == 'class']

    def to_dict(self):
        return {'day': self.day, 'entries': [e.to_dict() for e in self.entries]}


@dataclass
class TimetableResult:
    """A generated week plus the subjects that could not be fully placed."""
    days: List[DaySchedule]
    settings: SettingsData
    warnings: List[str] = field(default_factory=list)
    strategy: str = 'quota'
    statistics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return {
            'days': [d.to_dict() for d in self.days],
            'settings': self.settings.to_dict(),
            'warnings': list(self.warnings),
            'strategy': self.strategy,
            'statistics': self.statistics,
        }
