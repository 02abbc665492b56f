from flask import Blueprint, jsonify, request
from models import db, TimetableSettings
from utils.schedule_types import SettingsData

settings_bp = Blueprint('settings', __name__)

SETTINGS_FIELDS = ['working_days', 'start_time', 'end_time', 'period_duration', 'break_time',
                   'break_duration', 'lunch_time', 'lunch_duration', 'schedule_type']


@settings_bp.route('/', methods=['GET'])
def get_settings():
    """Get the active timetable settings."""
    settings = TimetableSettings.active()
    if not settings:
        return jsonify({'error': 'Timetable settings not configured'}), 404
    return jsonify(settings.to_dict())


@settings_bp.route('/', methods=['PUT'])
def update_settings():
    """Create the settings record, or update some of its fields."""
    data = request.get_json(silent=True) or {}
    settings = TimetableSettings.active()

    merged = settings.to_dict() if settings else {}
    merged.update({field: data[field] for field in SETTINGS_FIELDS if field in data})

    # Validate and normalise times; raises InvalidSettings / InvalidTimeFormat (400)
    validated = SettingsData.from_dict(merged).to_dict()

    created = settings is None
    if created:
        settings = TimetableSettings()
        db.session.add(settings)

    for field in SETTINGS_FIELDS:
        setattr(settings, field, validated[field])
    db.session.commit()

    return jsonify(settings.to_dict()), 201 if created else 200
