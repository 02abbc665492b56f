from .database import db


class Constraint(db.Model):
    """Scheduling restriction or preference for a subject or a teacher."""

    __tablename__ = 'constraints'

    id = db.Column(db.Integer, primary_key=True)
    subject_id = db.Column(db.Integer, db.ForeignKey('subjects.id'), nullable=True)
    teacher = db.Column(db.String(100), nullable=True)
    avoid_consecutive = db.Column(db.Boolean, default=False)
    prefer_morning = db.Column(db.Boolean, default=False)
    unavailable_slots = db.Column(db.JSON, nullable=False, default=list)  # [{"day": ..., "time": "HH:MM"}]

    def __repr__(self):
        return f'<Constraint {self.id} subject={self.subject_id} teacher={self.teacher}>'

    def to_dict(self):
        return {
            'id': self.id,
            'subject_id': self.subject_id,
            'teacher': self.teacher,
            'avoid_consecutive': bool(self.avoid_consecutive),
            'prefer_morning': bool(self.prefer_morning),
            'unavailable_slots': list(self.unavailable_slots or [])
        }
