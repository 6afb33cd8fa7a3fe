import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException
from extensions import db

logger = logging.getLogger(__name__)


def error_response(message, status_code, **extra):
    """Build the JSON error body shared by every API route."""
    payload = {'status': 'error', 'message': message}
    payload.update(extra)
    return jsonify(payload), status_code


def form_error_response(form):
    """Reject a request whose form failed validation."""
    return error_response('Validation failed', 400, errors=form.errors)


def register_error_handlers(app):
    """Render HTTP and unexpected errors as JSON."""

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        logger.error(f"Unhandled error: {error}", exc_info=True)
        return error_response('Server error', 500)

    return app
