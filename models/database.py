from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

def init_app(app):
    db.init_app(app)
    # Import models to register them with SQLAlchemy
    from .subject import Subject
    from .settings import TimetableSettings
    from .constraint import Constraint
    from .timetable import GeneratedTimetable
