"""Exceptions raised by the timetable generation core."""


class TimetableError(Exception):
    """Base class for input errors that abort a generation call."""


class InvalidTimeFormat(TimetableError, ValueError):
    """A time string could not be parsed as HH:MM."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid time format: {value!r} (expected HH:MM)")


class InvalidSettings(TimetableError, ValueError):
    """Timetable settings describe an impossible working day."""


class InvalidSubject(TimetableError, ValueError):
    """A subject record is missing its name or its quota/duration."""


class InvalidConstraint(TimetableError, ValueError):
    """A constraint record is malformed."""
