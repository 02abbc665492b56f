from .database import db
from .subject import Subject
from .settings import TimetableSettings
from .constraint import Constraint
from .timetable import GeneratedTimetable

__all__ = ['db', 'Subject', 'TimetableSettings', 'Constraint', 'GeneratedTimetable']
