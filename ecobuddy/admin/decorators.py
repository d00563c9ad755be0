"""
Admin Decorator
"""

from functools import wraps
from flask import abort, redirect, request, url_for
from flask_login import current_user


def admin_required(f):
    """Decorator to ensure the request is from an authenticated admin.

    Anonymous visitors are sent to the login page; logged-in users without
    the admin flag get a 403.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for('auth.login', next=request.path))
        if not current_user.is_admin:
            abort(403)
        return f(*args, **kwargs)
    return wrapper
