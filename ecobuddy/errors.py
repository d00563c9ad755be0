"""
Error Taxonomy

Service code raises these; the handlers registered by
``register_error_handlers`` turn them into JSON for the AJAX API and into
an error page for everything else.
"""

import logging

from flask import jsonify, render_template, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class FacilityError(Exception):
    """Base class for all application errors."""
    status_code = 500
    default_message = 'Something went wrong.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class AuthorizationError(FacilityError):
    """Missing or invalid anti-forgery token."""
    status_code = 403
    default_message = 'CSRF token validation failed.'


class ValidationError(FacilityError):
    """Malformed or out-of-domain input."""
    status_code = 400
    default_message = 'Invalid input.'


class NotFoundError(FacilityError):
    """Referenced facility does not exist."""
    status_code = 404
    default_message = 'Facility not found.'


class TransientStoreError(FacilityError):
    """The underlying store could not complete the operation."""
    status_code = 503
    default_message = 'The facility store is currently unavailable.'


def _wants_json():
    return request.path.startswith('/api/')


def register_error_handlers(app):
    """Attach JSON/page handlers for application and routing errors."""

    @app.errorhandler(FacilityError)
    def handle_facility_error(error):
        if isinstance(error, TransientStoreError):
            logger.error('Store failure on %s: %s', request.path, error.message)
        if _wants_json():
            return jsonify(error.to_dict()), error.status_code
        return render_template('error.html', message=error.message), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if not _wants_json():
            return error
        message = 'Invalid request method.' if error.code == 405 else error.description
        return jsonify({'success': False, 'error': message}), error.code
