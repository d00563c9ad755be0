"""
Admin Blueprint

Facility management for logged-in administrators.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from ecobuddy.admin import routes  # noqa: E402, F401
