from datetime import date, datetime, timedelta
from flask import Blueprint, request, jsonify
from flask_login import current_user
from sqlalchemy import func
from extensions import db
from models.mood import MoodEntry, MOOD_VALUES, MOTIVATIONAL_MESSAGES
from forms import MoodForm
from utils.errors import form_error_response
from utils.helpers import student_required

# Create blueprint
moods_bp = Blueprint('moods', __name__)

@moods_bp.route('/', methods=['GET'])
@student_required
def index():
    days = request.args.get('days', 7, type=int)
    since = date.today() - timedelta(days=days)

    moods = MoodEntry.query\
        .filter(MoodEntry.user_id == current_user.id, MoodEntry.entry_date >= since)\
        .order_by(MoodEntry.entry_date.desc())\
        .all()

    return jsonify({'moods': [m.to_dict() for m in moods]})

@moods_bp.route('/today', methods=['GET'])
@student_required
def today():
    mood = MoodEntry.query.filter_by(user_id=current_user.id, entry_date=date.today()).first()
    return jsonify({'mood': mood.to_dict() if mood else None})

@moods_bp.route('/', methods=['POST'])
@student_required
def log_mood():
    form = MoodForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    # Update or create today's mood entry
    entry = MoodEntry.query.filter_by(user_id=current_user.id, entry_date=date.today()).first()
    if entry is None:
        entry = MoodEntry(user_id=current_user.id, entry_date=date.today())
        db.session.add(entry)

    entry.mood = form.mood.data
    entry.mood_value = MOOD_VALUES[form.mood.data]
    entry.note = form.note.data
    entry.stress_level = form.stress_level.data
    entry.sleep_hours = form.sleep_hours.data
    entry.activities = form.activities.data or []
    entry.logged_at = datetime.utcnow()

    db.session.commit()

    return jsonify({
        'mood': entry.to_dict(),
        'message': 'Mood logged successfully',
        'motivational_message': MOTIVATIONAL_MESSAGES[entry.mood]
    }), 201

@moods_bp.route('/stats', methods=['GET'])
@student_required
def stats():
    since = date.today() - timedelta(days=30)
    base_filter = (MoodEntry.user_id == current_user.id, MoodEntry.entry_date >= since)

    averages = db.session.query(
        func.avg(MoodEntry.mood_value).label('average_mood'),
        func.count(MoodEntry.id).label('total_entries'),
        func.avg(MoodEntry.stress_level).label('average_stress'),
        func.avg(MoodEntry.sleep_hours).label('average_sleep')
    ).filter(*base_filter).first()

    distribution = db.session.query(
        MoodEntry.mood,
        func.count(MoodEntry.id)
    ).filter(*base_filter)\
     .group_by(MoodEntry.mood)\
     .all()

    return jsonify({
        'stats': {
            'average_mood': float(averages.average_mood or 0),
            'total_entries': averages.total_entries or 0,
            'average_stress': float(averages.average_stress or 0),
            'average_sleep': float(averages.average_sleep or 0),
            'mood_distribution': {mood: count for mood, count in distribution}
        }
    })
