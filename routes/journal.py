from flask import Blueprint, request, jsonify
from flask_login import current_user
from models.journal import JournalEntry
from ai_services.sentiment_trends import build_sentiment_stats, TREND_WINDOW
from services import journal_service
from forms import JournalEntryForm, JournalEntryUpdateForm
from utils.errors import error_response, form_error_response
from utils.helpers import login_required_api, parse_bool, submitted_fields, json_serial

# Create blueprint
journal_bp = Blueprint('journal', __name__)

@journal_bp.route('/', methods=['GET'])
@login_required_api
def index():
    if parse_bool(request.args.get('refresh'), default=False):
        entries = journal_service.refresh_entries(current_user.id)
    else:
        entries = JournalEntry.find_by_user(current_user.id)

    return jsonify([entry.to_dict() for entry in entries])

@journal_bp.route('/stats/sentiment', methods=['GET'])
@login_required_api
def sentiment_stats():
    entries = JournalEntry.recent_window(current_user.id, limit=TREND_WINDOW)
    stats = build_sentiment_stats(entries)

    for point in stats['sentiment_trend']:
        point['date'] = json_serial(point['date'])

    return jsonify(stats)

@journal_bp.route('/<int:entry_id>', methods=['GET'])
@login_required_api
def view_entry(entry_id):
    entry = JournalEntry.find_by_id(entry_id, current_user.id)
    if entry is None:
        return error_response('Journal not found', 404)
    return jsonify(entry.to_dict())

@journal_bp.route('/', methods=['POST'])
@login_required_api
def new_entry():
    payload = request.get_json(silent=True) or {}
    form = JournalEntryForm()

    if not form.validate_on_submit():
        return form_error_response(form)

    entry = journal_service.create_entry(current_user.id, submitted_fields(form, payload))

    return jsonify({
        'message': 'Journal created successfully',
        'journal': entry.to_dict()
    }), 201

@journal_bp.route('/<int:entry_id>', methods=['PUT'])
@login_required_api
def edit_entry(entry_id):
    payload = request.get_json(silent=True) or {}
    form = JournalEntryUpdateForm()

    if not form.validate_on_submit():
        return form_error_response(form)

    entry = journal_service.update_entry(entry_id, current_user.id, submitted_fields(form, payload))
    if entry is None:
        return error_response('Journal not found', 404)

    return jsonify({
        'message': 'Journal updated successfully',
        'journal': entry.to_dict()
    })

@journal_bp.route('/<int:entry_id>', methods=['DELETE'])
@login_required_api
def delete_entry(entry_id):
    if not journal_service.delete_entry(entry_id, current_user.id):
        return error_response('Journal not found', 404)
    return jsonify({'message': 'Journal deleted successfully'})
