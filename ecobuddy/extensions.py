"""
Flask Extensions

Authentication is session-based through Flask-Login; the rest of the
application only sees the principal through the request context.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Login manager for admin and user authentication
login_manager = LoginManager()
