"""Routes for generating, saving and exporting timetables."""

from flask import Blueprint, Response, current_app, jsonify, request
from models import db, Constraint, GeneratedTimetable, Subject, TimetableSettings
from utils.export import timetable_to_csv
from utils.schedule_types import ConstraintData, SettingsData, SubjectData
from utils.timetable_generator import generate_timetable

timetables_bp = Blueprint('timetables', __name__)


@timetables_bp.route('/generate', methods=['POST'])
def generate():
    """
    Generate a timetable from the stored subjects, settings and constraints.

    Optional JSON body:
        seed: int, seeds the tie-break (defaults to GENERATION_SEED config)
        strategy: 'quota' or 'duration' to override auto-detection
        save: bool, store the result as a GeneratedTimetable
        name: name for the stored timetable
    """
    data = request.get_json(silent=True) or {}

    settings_row = TimetableSettings.active()
    if not settings_row:
        return jsonify({'error': 'Timetable settings not configured'}), 400

    subject_rows = Subject.query.order_by(Subject.id).all()
    if not subject_rows:
        return jsonify({'error': 'Add at least one subject before generating a timetable'}), 400

    # Invalid stored records raise TimetableError and are reported as 400
    settings = SettingsData.from_dict(settings_row.to_dict())
    subjects = [SubjectData.from_dict(s.to_dict()) for s in subject_rows]
    constraints = [ConstraintData.from_dict(c.to_dict()) for c in Constraint.query.all()]

    seed = data.get('seed', current_app.config.get('GENERATION_SEED'))
    strategy = data.get('strategy')
    if strategy not in (None, 'quota', 'duration'):
        return jsonify({'error': f'Unknown strategy {strategy!r}'}), 400

    result = generate_timetable(settings, subjects, constraints, seed=seed, strategy=strategy)
    current_app.logger.info(
        f"Generated timetable: {result.statistics.get('total_classes', 0)} classes, "
        f"{len(result.warnings)} warning(s)"
    )

    payload = result.to_dict()
    response = {
        'success': True,
        'timetable': payload,
        'warnings': result.warnings
    }

    if data.get('save'):
        saved = GeneratedTimetable(
            name=data.get('name') or 'Untitled timetable',
            timetable=payload,
            warnings=result.warnings
        )
        db.session.add(saved)
        db.session.commit()
        response['saved'] = saved.to_dict()

    return jsonify(response), 201 if data.get('save') else 200


@timetables_bp.route('/', methods=['GET'])
def get_timetables():
    """Get all saved timetables, newest first."""
    timetables = GeneratedTimetable.query.order_by(GeneratedTimetable.created_at.desc(),
                                                   GeneratedTimetable.id.desc()).all()
    return jsonify({'timetables': [t.to_dict() for t in timetables]})


@timetables_bp.route('/<int:timetable_id>', methods=['GET'])
def get_timetable(timetable_id):
    timetable = GeneratedTimetable.query.get_or_404(timetable_id)
    return jsonify(timetable.to_dict())


@timetables_bp.route('/', methods=['POST'])
def save_timetable():
    """Save a timetable payload under a name."""
    data = request.get_json(silent=True) or {}

    # Validate required fields
    for field in ['name', 'timetable']:
        if not data.get(field):
            return jsonify({'error': f'{field} is required'}), 400
    if not isinstance(data['timetable'], dict) or 'days' not in data['timetable']:
        return jsonify({'error': 'timetable must contain days'}), 400

    try:
        timetable = GeneratedTimetable(
            name=data['name'],
            timetable=data['timetable'],
            warnings=data.get('warnings') or data['timetable'].get('warnings') or []
        )
        db.session.add(timetable)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error saving timetable: {e}")
        return jsonify({'error': str(e)}), 500

    return jsonify(timetable.to_dict()), 201


@timetables_bp.route('/<int:timetable_id>', methods=['PUT'])
def update_timetable(timetable_id):
    """Rename a saved timetable or replace its payload."""
    timetable = GeneratedTimetable.query.get_or_404(timetable_id)
    data = request.get_json(silent=True) or {}

    if 'name' in data:
        if not data['name']:
            return jsonify({'error': 'name cannot be empty'}), 400
        timetable.name = data['name']
    if 'timetable' in data:
        if not isinstance(data['timetable'], dict) or 'days' not in data['timetable']:
            return jsonify({'error': 'timetable must contain days'}), 400
        timetable.timetable = data['timetable']
    if 'warnings' in data:
        timetable.warnings = data['warnings'] or []

    db.session.commit()
    return jsonify(timetable.to_dict())


@timetables_bp.route('/<int:timetable_id>', methods=['DELETE'])
def delete_timetable(timetable_id):
    timetable = GeneratedTimetable.query.get_or_404(timetable_id)
    db.session.delete(timetable)
    db.session.commit()
    return '', 204


@timetables_bp.route('/<int:timetable_id>/export', methods=['GET'])
def export_timetable(timetable_id):
    """Download a saved timetable as CSV."""
    timetable = GeneratedTimetable.query.get_or_404(timetable_id)
    csv_content = timetable_to_csv(timetable.timetable)
    return Response(
        csv_content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename=timetable-{timetable.id}.csv'}
    )
