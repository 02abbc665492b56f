"""Seed data script to populate the database with default subjects and settings."""

from models import db, Subject, TimetableSettings, Constraint, GeneratedTimetable


DEFAULT_SUBJECTS = [
    {'code': 'MATH', 'name': 'Mathematics', 'teacher': 'Mr. Johnson', 'periods_per_week': 5, 'color': '#3B82F6'},
    {'code': 'PHY', 'name': 'Physics', 'teacher': 'Ms. Williams', 'periods_per_week': 4, 'color': '#10B981'},
    {'code': 'ENG', 'name': 'English', 'teacher': 'Mr. Davis', 'periods_per_week': 4, 'color': '#6366F1'},
    {'code': 'CHEM', 'name': 'Chemistry', 'teacher': 'Ms. Thompson', 'periods_per_week': 3, 'color': '#8B5CF6'},
    {'code': 'BIO', 'name': 'Biology', 'teacher': 'Ms. Martinez', 'periods_per_week': 3, 'color': '#EC4899'},
]

DEFAULT_SETTINGS = {
    'working_days': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday'],
    'start_time': '08:00',
    'end_time': '16:00',
    'period_duration': 45,
    'break_time': '10:30',
    'break_duration': 15,
    'lunch_time': '12:30',
    'lunch_duration': 45,
    'schedule_type': 'weekly',
}


def seed_database():
    """Replace all data with the defaults."""

    # Clear existing data
    GeneratedTimetable.query.delete()
    Constraint.query.delete()
    Subject.query.delete()
    TimetableSettings.query.delete()

    for s_data in DEFAULT_SUBJECTS:
        db.session.add(Subject(**s_data))
    db.session.add(TimetableSettings(**DEFAULT_SETTINGS))

    db.session.commit()


def seed_defaults():
    """
    Insert default subjects and settings into an empty database.

    Tables that already hold data are left alone.

    Returns:
        True if anything was inserted
    """
    seeded = False

    if Subject.query.first() is None:
        for s_data in DEFAULT_SUBJECTS:
            db.session.add(Subject(**s_data))
        seeded = True

    if TimetableSettings.active() is None:
        db.session.add(TimetableSettings(**DEFAULT_SETTINGS))
        seeded = True

    if seeded:
        db.session.commit()
    return seeded


if __name__ == '__main__':
    from app import create_app

    app = create_app()
    with app.app_context():
        seed_database()
        print("Database seeded successfully!")
