from flask import Blueprint, jsonify, request, current_app
from models import db, Subject
from utils.schedule_types import SubjectData

subjects_bp = Blueprint('subjects', __name__)

SUBJECT_FIELDS = ['code', 'name', 'teacher', 'periods_per_week', 'duration', 'color', 'room']


@subjects_bp.route('/', methods=['GET'])
def get_subjects():
    """Get all subjects."""
    subjects = Subject.query.order_by(Subject.id).all()
    return jsonify({
        'subjects': [subject.to_dict() for subject in subjects],
        'count': len(subjects),
        'total_periods': sum(s.periods_per_week or 0 for s in subjects)
    })


@subjects_bp.route('/<int:subject_id>', methods=['GET'])
def get_subject(subject_id):
    """Get subject details by ID."""
    subject = Subject.query.get_or_404(subject_id)
    return jsonify(subject.to_dict())


@subjects_bp.route('/', methods=['POST'])
def create_subject():
    """Add a subject."""
    data = request.get_json(silent=True) or {}

    # Validates name and quota/duration; raises InvalidSubject (400). The id comes from the insert
    SubjectData.from_dict(data, require_id=False)

    try:
        subject = Subject(**{field: data[field] for field in SUBJECT_FIELDS if field in data})
        db.session.add(subject)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating subject: {e}")
        return jsonify({'error': str(e)}), 500

    return jsonify(subject.to_dict()), 201


@subjects_bp.route('/<int:subject_id>', methods=['PUT', 'PATCH'])
def update_subject(subject_id):
    """Update some or all fields of a subject."""
    subject = Subject.query.get_or_404(subject_id)
    data = request.get_json(silent=True) or {}

    merged = subject.to_dict()
    merged.update({field: data[field] for field in SUBJECT_FIELDS if field in data})
    SubjectData.from_dict(merged)

    for field in SUBJECT_FIELDS:
        if field in data:
            setattr(subject, field, data[field])
    db.session.commit()

    return jsonify(subject.to_dict())


@subjects_bp.route('/<int:subject_id>', methods=['DELETE'])
def delete_subject(subject_id):
    """Delete a subject and its constraints."""
    subject = Subject.query.get_or_404(subject_id)
    db.session.delete(subject)
    db.session.commit()
    return jsonify({'success': True})
