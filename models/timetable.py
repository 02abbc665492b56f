from datetime import datetime
from .database import db


class GeneratedTimetable(db.Model):
    """A saved timetable: the generated days plus the settings snapshot."""

    __tablename__ = 'generated_timetables'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    timetable = db.Column(db.JSON, nullable=False)  # TimetableResult.to_dict()
    warnings = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<GeneratedTimetable {self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'timetable': self.timetable,
            'warnings': list(self.warnings or []),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
