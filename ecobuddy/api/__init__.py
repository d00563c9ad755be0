"""
API Blueprint

JSON endpoints used by the live search and the dashboard map.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__)

from ecobuddy.api import routes  # noqa: E402, F401
