from collections import defaultdict
from datetime import datetime, timedelta
from flask import Blueprint, request, jsonify
from flask_login import current_user
from extensions import db
from models.study_session import StudySession
from models.task import Task
from forms import StudySessionForm, StudySessionUpdateForm
from ai_services.sentiment_analyzer import round_half_up
from utils.errors import error_response, form_error_response
from utils.helpers import student_required, submitted_fields, apply_changes

# Create blueprint
study_bp = Blueprint('study', __name__)

STATS_PERIODS = {
    'week': timedelta(days=7),
    'month': timedelta(days=30),
}

EDITABLE_FIELDS = ('subject', 'duration', 'planned_duration', 'break_duration', 'type',
                   'start_time', 'end_time', 'is_completed', 'productivity', 'notes')

def _owned_task_id(task_id):
    """The task id if the current user owns it, else raise a 404."""
    if task_id is None:
        return None
    Task.query.filter_by(id=task_id, user_id=current_user.id).first_or_404(
        description='Related task not found'
    )
    return task_id

@study_bp.route('/', methods=['GET'])
@student_required
def index():
    days = request.args.get('days', 7, type=int)
    since = datetime.utcnow() - timedelta(days=days)

    query = StudySession.query.filter(
        StudySession.user_id == current_user.id,
        StudySession.start_time >= since
    )
    if request.args.get('subject'):
        query = query.filter_by(subject=request.args['subject'])
    if request.args.get('type'):
        query = query.filter_by(type=request.args['type'])

    sessions = query.order_by(StudySession.start_time.desc()).all()
    return jsonify({'sessions': [s.to_dict() for s in sessions]})

@study_bp.route('/', methods=['POST'])
@student_required
def log_session():
    form = StudySessionForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    session = StudySession(
        user_id=current_user.id,
        subject=form.subject.data.strip(),
        duration=form.duration.data,
        planned_duration=form.planned_duration.data or 25,
        break_duration=form.break_duration.data if form.break_duration.data is not None else 5,
        type=form.type.data,
        start_time=form.start_time.data,
        end_time=form.end_time.data,
        is_completed=form.is_completed.data,
        productivity=form.productivity.data,
        notes=form.notes.data,
        related_task_id=_owned_task_id(form.related_task_id.data)
    )

    db.session.add(session)
    db.session.commit()

    return jsonify({'session': session.to_dict(), 'message': 'Study session logged successfully'}), 201

@study_bp.route('/<int:session_id>', methods=['PUT'])
@student_required
def update_session(session_id):
    session = StudySession.query.filter_by(id=session_id, user_id=current_user.id).first()
    if session is None:
        return error_response('Study session not found', 404)

    payload = request.get_json(silent=True) or {}
    form = StudySessionUpdateForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    changes = submitted_fields(form, payload)
    apply_changes(session, changes, EDITABLE_FIELDS)
    if 'related_task_id' in changes:
        session.related_task_id = _owned_task_id(changes['related_task_id'])

    db.session.commit()
    return jsonify({'session': session.to_dict(), 'message': 'Study session updated successfully'})

@study_bp.route('/<int:session_id>', methods=['DELETE'])
@student_required
def delete_session(session_id):
    session = StudySession.query.filter_by(id=session_id, user_id=current_user.id).first()
    if session is None:
        return error_response('Study session not found', 404)

    db.session.delete(session)
    db.session.commit()
    return jsonify({'message': 'Study session deleted successfully'})

@study_bp.route('/stats', methods=['GET'])
@student_required
def stats():
    period = request.args.get('period', 'week')

    query = StudySession.query.filter_by(user_id=current_user.id)
    if period in STATS_PERIODS:
        query = query.filter(StudySession.start_time >= datetime.utcnow() - STATS_PERIODS[period])
    sessions = query.all()

    total_hours = sum(s.duration for s in sessions) / 60
    rated = [s.productivity for s in sessions if s.productivity]

    subject_hours = defaultdict(float)
    for s in sessions:
        subject_hours[s.subject] += s.duration / 60

    return jsonify({
        'stats': {
            'total_sessions': len(sessions),
            'total_hours': round_half_up(total_hours, 2),
            'average_session': round_half_up(total_hours / len(sessions), 2) if sessions else 0,
            'average_productivity': round_half_up(sum(rated) / len(rated), 2) if rated else 0,
            'completed_sessions': sum(1 for s in sessions if s.is_completed),
            'subject_breakdown': [
                {'subject': subject, 'hours': round_half_up(hours, 2)}
                for subject, hours in subject_hours.items()
            ]
        }
    })
