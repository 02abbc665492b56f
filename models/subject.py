from .database import db


class Subject(db.Model):
    """Subject model representing a unit of instruction to schedule."""

    __tablename__ = 'subjects'

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), nullable=True)
    name = db.Column(db.String(200), nullable=False)
    teacher = db.Column(db.String(100), nullable=True)
    periods_per_week = db.Column(db.Integer, nullable=True)  # Quota-based subjects
    duration = db.Column(db.Integer, nullable=True)  # Minutes, single-session subjects
    color = db.Column(db.String(20), nullable=False, default='#3B82F6')
    room = db.Column(db.String(50), nullable=True)

    # Relationship to constraints
    constraints = db.relationship('Constraint', backref='subject', lazy='dynamic',
                                  cascade="all, delete-orphan")

    def __repr__(self):
        return f'<Subject {self.code or self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'name': self.name,
            'teacher': self.teacher,
            'periods_per_week': self.periods_per_week,
            'duration': self.duration,
            'color': self.color,
            'room': self.room
        }
