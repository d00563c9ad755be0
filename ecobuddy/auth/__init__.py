"""
Auth Blueprint

Session-based login through Flask-Login. Admin rights come from the
``is_admin`` flag on the logged-in user.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from ecobuddy.auth import routes  # noqa: E402, F401
