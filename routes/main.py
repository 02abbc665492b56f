from flask import Blueprint, jsonify, current_app
from models import Subject, TimetableSettings, GeneratedTimetable

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Service overview."""
    return jsonify({
        'name': current_app.config.get('APP_NAME', 'School Timetable Generator'),
        'endpoints': {
            'subjects': '/api/subjects',
            'settings': '/api/settings',
            'constraints': '/api/constraints',
            'timetables': '/api/timetables',
            'generate': '/api/timetables/generate'
        }
    })


@main_bp.route('/api/health')
def health():
    return jsonify({
        'status': 'ok',
        'subjects': Subject.query.count(),
        'settings_configured': TimetableSettings.active() is not None,
        'saved_timetables': GeneratedTimetable.query.count()
    })
