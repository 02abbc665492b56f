from flask import Blueprint, jsonify, request
from models import db, Constraint, Subject
from utils.schedule_types import ConstraintData
from utils.time_utils import normalize_time

constraints_bp = Blueprint('constraints', __name__)

CONSTRAINT_FIELDS = ['subject_id', 'teacher', 'avoid_consecutive', 'prefer_morning', 'unavailable_slots']


def _clean(data):
    """Validate a constraint payload and normalise its slot times."""
    ConstraintData.from_dict(data)

    cleaned = {field: data[field] for field in CONSTRAINT_FIELDS if field in data}
    if 'unavailable_slots' in cleaned:
        cleaned['unavailable_slots'] = [
            {'day': str(slot['day']), 'time': normalize_time(slot['time'])}
            for slot in cleaned['unavailable_slots'] or []
        ]
    return cleaned


@constraints_bp.route('/', methods=['GET'])
def get_constraints():
    """Get all constraints."""
    constraints = Constraint.query.order_by(Constraint.id).all()
    return jsonify({'constraints': [c.to_dict() for c in constraints]})


@constraints_bp.route('/<int:constraint_id>', methods=['GET'])
def get_constraint(constraint_id):
    constraint = Constraint.query.get_or_404(constraint_id)
    return jsonify(constraint.to_dict())


@constraints_bp.route('/', methods=['POST'])
def create_constraint():
    """Add a constraint for a subject or a teacher."""
    data = request.get_json(silent=True) or {}

    if data.get('subject_id') is None and not data.get('teacher'):
        return jsonify({'error': 'subject_id or teacher is required'}), 400
    if data.get('subject_id') is not None and not Subject.query.get(data['subject_id']):
        return jsonify({'error': 'Subject not found'}), 404

    constraint = Constraint(**_clean(data))
    if constraint.unavailable_slots is None:
        constraint.unavailable_slots = []
    db.session.add(constraint)
    db.session.commit()

    return jsonify(constraint.to_dict()), 201


@constraints_bp.route('/<int:constraint_id>', methods=['PUT', 'PATCH'])
def update_constraint(constraint_id):
    """Update some or all fields of a constraint."""
    constraint = Constraint.query.get_or_404(constraint_id)
    data = request.get_json(silent=True) or {}

    subject_id = data['subject_id'] if 'subject_id' in data else constraint.subject_id
    teacher = data['teacher'] if 'teacher' in data else constraint.teacher
    if subject_id is None and not teacher:
        return jsonify({'error': 'subject_id or teacher is required'}), 400
    if data.get('subject_id') is not None and not Subject.query.get(data['subject_id']):
        return jsonify({'error': 'Subject not found'}), 404

    for field, value in _clean(data).items():
        setattr(constraint, field, value)
    db.session.commit()

    return jsonify(constraint.to_dict())


@constraints_bp.route('/<int:constraint_id>', methods=['DELETE'])
def delete_constraint(constraint_id):
    constraint = Constraint.query.get_or_404(constraint_id)
    db.session.delete(constraint)
    db.session.commit()
    return jsonify({'success': True})
