"""
Request Context

Endpoints build a ``RequestContext`` from the incoming request and pass it
to the code that needs the caller's identity or anti-forgery token, instead
of reaching into ``session`` and ``current_user`` from everywhere.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from flask import request
from flask_login import current_user
from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms.validators import ValidationError as CSRFValidationError

from ecobuddy.errors import AuthorizationError

logger = logging.getLogger(__name__)

CSRF_HEADER = 'X-CSRF-Token'
CSRF_FIELD = 'csrf_token'


@dataclass(frozen=True)
class RequestContext:
    """Authenticated principal (or None) plus the token the caller submitted."""
    principal: Optional[Any]
    submitted_token: Optional[str]

    @classmethod
    def from_header(cls):
        return cls(_principal(), request.headers.get(CSRF_HEADER))

    @classmethod
    def from_form(cls):
        return cls(_principal(), request.form.get(CSRF_FIELD))

    @property
    def is_admin(self):
        return bool(self.principal is not None and getattr(self.principal, 'is_admin', False))

    @property
    def username(self):
        return getattr(self.principal, 'username', None)

    def require_valid_token(self):
        """Raise AuthorizationError unless the submitted token matches the session."""
        try:
            validate_csrf(self.submitted_token)
        except CSRFValidationError as e:
            logger.warning('Rejected request to %s: %s', request.path, e)
            raise AuthorizationError('Invalid CSRF token') from e
        return self


def _principal():
    if current_user and current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def issue_token():
    """Return the session's anti-forgery token, creating it if needed."""
    return generate_csrf()
