from datetime import datetime, date
from functools import wraps
from flask import jsonify
from flask_login import current_user

def login_required_api(f):
    """API route decorator to require authentication."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({
                'status': 'error',
                'message': 'Authentication required'
            }), 401
        return f(*args, **kwargs)
    return decorated_function

def role_required(*roles):
    """API route decorator to restrict a route to the given user roles."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({
                    'status': 'error',
                    'message': 'Authentication required'
                }), 401

            if current_user.role not in roles:
                return jsonify({
                    'status': 'error',
                    'message': 'You do not have permission to access this resource'
                }), 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator

student_required = role_required('student')

def json_serial(obj):
    """Serialize datetimes for JSON responses."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    return obj

def parse_bool(value, default=None):
    """Interpret query-string and JSON booleans."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')

def get_limit(value, default=50, maximum=200):
    """Get a bounded result limit from a query parameter."""
    try:
        limit = int(value)
        if limit < 1:
            limit = default
    except (TypeError, ValueError):
        limit = default

    return min(limit, maximum)

def submitted_fields(form, payload):
    """Validated form data limited to the keys the client actually sent."""
    return {
        name: field.data
        for name, field in form._fields.items()
        if name in payload
    }

def apply_changes(obj, changes, fields):
    """Copy submitted values onto a model, skipping blanks."""
    for field in fields:
        if field in changes and changes[field] not in (None, ''):
            setattr(obj, field, changes[field])
    return obj
