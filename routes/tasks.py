from datetime import datetime, timedelta
from flask import Blueprint, request, jsonify
from flask_login import current_user
from extensions import db
from models.task import Task
from forms import TaskForm, TaskUpdateForm
from utils.errors import error_response, form_error_response
from utils.helpers import student_required, get_limit, submitted_fields, apply_changes

# Create blueprint
tasks_bp = Blueprint('tasks', __name__)

SORTABLE_COLUMNS = {
    'dueDate': Task.due_date,
    'due_date': Task.due_date,
    'priority': Task.priority,
    'createdAt': Task.created_at,
    'created_at': Task.created_at,
    'title': Task.title,
}

EDITABLE_FIELDS = ('title', 'description', 'subject', 'priority', 'due_date',
                   'estimated_hours', 'actual_hours', 'tags')

@tasks_bp.route('/', methods=['GET'])
@student_required
def index():
    status = request.args.get('status')
    subject = request.args.get('subject')
    priority = request.args.get('priority')
    sort_column = SORTABLE_COLUMNS.get(request.args.get('sort_by', 'due_date'), Task.due_date)
    limit = get_limit(request.args.get('limit'))

    query = Task.query.filter_by(user_id=current_user.id)

    if status == 'completed':
        query = query.filter_by(is_completed=True)
    elif status == 'pending':
        query = query.filter_by(is_completed=False)
    if subject:
        query = query.filter_by(subject=subject)
    if priority:
        query = query.filter_by(priority=priority)

    tasks = query.order_by(sort_column.asc()).limit(limit).all()
    return jsonify({'tasks': [t.to_dict() for t in tasks]})

@tasks_bp.route('/upcoming', methods=['GET'])
@student_required
def upcoming():
    week_ahead = datetime.utcnow() + timedelta(days=7)

    tasks = Task.query\
        .filter(Task.user_id == current_user.id,
                Task.is_completed.is_(False),
                Task.due_date <= week_ahead)\
        .order_by(Task.due_date.asc())\
        .limit(10)\
        .all()

    return jsonify({'tasks': [t.to_dict() for t in tasks]})

@tasks_bp.route('/stats', methods=['GET'])
@student_required
def stats():
    tasks = Task.query.filter_by(user_id=current_user.id).all()

    total = len(tasks)
    completed = sum(1 for t in tasks if t.is_completed)
    overdue = sum(1 for t in tasks if t.is_overdue)

    return jsonify({
        'stats': {
            'total': total,
            'completed': completed,
            'pending': total - completed,
            'overdue': overdue,
            'completion_rate': round(completed / total * 100, 1) if total else 0
        }
    })

@tasks_bp.route('/', methods=['POST'])
@student_required
def create_task():
    form = TaskForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    task = Task(
        user_id=current_user.id,
        title=form.title.data.strip(),
        description=form.description.data,
        subject=form.subject.data.strip(),
        priority=form.priority.data,
        due_date=form.due_date.data,
        estimated_hours=form.estimated_hours.data if form.estimated_hours.data is not None else 1,
        actual_hours=form.actual_hours.data or 0,
        tags=form.tags.data or []
    )
    task.set_completed(form.is_completed.data)

    db.session.add(task)
    db.session.commit()

    return jsonify({'task': task.to_dict(), 'message': 'Task created successfully'}), 201

@tasks_bp.route('/<int:task_id>', methods=['PUT'])
@student_required
def update_task(task_id):
    task = Task.query.filter_by(id=task_id, user_id=current_user.id).first()
    if task is None:
        return error_response('Task not found', 404)

    payload = request.get_json(silent=True) or {}
    form = TaskUpdateForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    changes = submitted_fields(form, payload)
    apply_changes(task, changes, EDITABLE_FIELDS)

    if 'is_completed' in changes:
        task.set_completed(changes['is_completed'])

    db.session.commit()
    return jsonify({'task': task.to_dict(), 'message': 'Task updated successfully'})

@tasks_bp.route('/<int:task_id>', methods=['DELETE'])
@student_required
def delete_task(task_id):
    task = Task.query.filter_by(id=task_id, user_id=current_user.id).first()
    if task is None:
        return error_response('Task not found', 404)

    db.session.delete(task)
    db.session.commit()
    return jsonify({'message': 'Task deleted successfully'})
