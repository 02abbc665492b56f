from .database import db


class TimetableSettings(db.Model):
    """The working envelope: days, hours, period length, break and lunch."""

    __tablename__ = 'timetable_settings'

    id = db.Column(db.Integer, primary_key=True)
    working_days = db.Column(db.JSON, nullable=False)  # e.g. ["Monday", "Tuesday"]
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)
    period_duration = db.Column(db.Integer, nullable=False)
    break_time = db.Column(db.String(5), nullable=False)
    break_duration = db.Column(db.Integer, nullable=False)
    lunch_time = db.Column(db.String(5), nullable=False)
    lunch_duration = db.Column(db.Integer, nullable=False)
    schedule_type = db.Column(db.String(10), nullable=False, default='weekly')  # daily, weekly

    @classmethod
    def active(cls):
        """Only one settings record is in use at a time."""
        return cls.query.order_by(cls.id).first()

    def __repr__(self):
        return f'<TimetableSettings {self.start_time}-{self.end_time}>'

    def to_dict(self):
        return {
            'id': self.id,
            'working_days': list(self.working_days or []),
            'start_time': self.start_time,
            'end_time': self.end_time,
            'period_duration': self.period_duration,
            'break_time': self.break_time,
            'break_duration': self.break_duration,
            'lunch_time': self.lunch_time,
            'lunch_duration': self.lunch_duration,
            'schedule_type': self.schedule_type
        }
