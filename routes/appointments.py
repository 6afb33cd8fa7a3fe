import logging
from datetime import datetime
from flask import Blueprint, request, jsonify
from flask_login import current_user
from extensions import db
from models.appointment import Appointment
from models.user import User
from forms import AppointmentForm, AppointmentStatusForm
from utils.errors import error_response, form_error_response
from utils.helpers import role_required, student_required, parse_bool, get_limit

logger = logging.getLogger(__name__)

# Create blueprint
appointments_bp = Blueprint('appointments', __name__)

counselor_required = role_required('counselor')
member_required = role_required('student', 'counselor')

@appointments_bp.route('/', methods=['GET'])
@member_required
def index():
    status = request.args.get('status')
    limit = get_limit(request.args.get('limit'), default=20)

    query = Appointment.for_user(current_user)
    if status:
        query = query.filter_by(status=status)
    if parse_bool(request.args.get('upcoming'), default=False):
        query = query.filter(Appointment.scheduled_date >= datetime.utcnow())

    appointments = query\
        .order_by(Appointment.scheduled_date.asc(), Appointment.created_at.desc())\
        .limit(limit)\
        .all()

    return jsonify({'appointments': [a.to_dict() for a in appointments]})

@appointments_bp.route('/counselors', methods=['GET'])
@student_required
def counselors():
    specialization = request.args.get('specialization')

    counselors = User.query\
        .filter_by(role='counselor', is_active_account=True)\
        .order_by(User.first_name.asc())\
        .all()

    if specialization:
        counselors = [c for c in counselors if specialization in (c.specializations or [])]

    return jsonify({'counselors': [c.to_summary() for c in counselors]})

@appointments_bp.route('/', methods=['POST'])
@student_required
def request_appointment():
    form = AppointmentForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    counselor = User.query.filter_by(
        id=form.counselor_id.data, role='counselor', is_active_account=True
    ).first()
    if counselor is None:
        return error_response('Counselor not found', 404)

    appointment = Appointment(
        student_id=current_user.id,
        counselor_id=counselor.id,
        type=form.type.data,
        preferred_date=form.preferred_date.data,
        description=form.description.data,
        is_urgent=form.is_urgent.data,
        duration=form.duration.data or 60,
        location=form.location.data
    )

    db.session.add(appointment)
    db.session.commit()

    if appointment.is_urgent:
        logger.warning(f"Urgent {appointment.type} appointment {appointment.id} requested")

    return jsonify({
        'appointment': appointment.to_dict(),
        'message': 'Appointment request submitted successfully'
    }), 201

@appointments_bp.route('/<int:appointment_id>/status', methods=['PUT'])
@counselor_required
def update_status(appointment_id):
    appointment = Appointment.query.filter_by(
        id=appointment_id, counselor_id=current_user.id
    ).first()
    if appointment is None:
        return error_response('Appointment not found', 404)

    form = AppointmentStatusForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    appointment.status = form.status.data
    if form.scheduled_date.data:
        appointment.scheduled_date = form.scheduled_date.data
    if form.counselor_notes.data:
        appointment.counselor_notes = form.counselor_notes.data
    if form.meeting_link.data:
        appointment.meeting_link = form.meeting_link.data
    if 'follow_up_required' in (request.get_json(silent=True) or {}):
        appointment.follow_up_required = form.follow_up_required.data

    db.session.commit()

    return jsonify({
        'appointment': appointment.to_dict(),
        'message': f'Appointment {appointment.status} successfully'
    })

@appointments_bp.route('/<int:appointment_id>/cancel', methods=['PUT'])
@member_required
def cancel(appointment_id):
    appointment = Appointment.for_user(current_user).filter_by(id=appointment_id).first()
    if appointment is None:
        return error_response('Appointment not found', 404)

    if appointment.status == 'completed':
        return error_response('Cannot cancel completed appointment', 400)

    appointment.status = 'cancelled'
    db.session.commit()

    return jsonify({
        'appointment': appointment.to_dict(),
        'message': 'Appointment cancelled successfully'
    })

@appointments_bp.route('/stats', methods=['GET'])
@counselor_required
def stats():
    appointments = Appointment.query.filter_by(counselor_id=current_user.id).all()

    def count(status):
        return sum(1 for a in appointments if a.status == status)

    return jsonify({
        'stats': {
            'total': len(appointments),
            'pending': count('pending'),
            'approved': count('approved'),
            'completed': count('completed'),
            'cancelled': count('cancelled'),
            'urgent': sum(1 for a in appointments if a.is_urgent)
        }
    })
