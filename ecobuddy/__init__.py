"""
EcoBuddy Facility Locator - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError
from ecobuddy.extensions import db, login_manager
from ecobuddy.config import Config
from ecobuddy.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'

    # Register blueprints
    from ecobuddy.auth import auth_bp
    from ecobuddy.admin import admin_bp
    from ecobuddy.dashboard import dashboard_bp
    from ecobuddy.api import api_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    register_error_handlers(app)

    # Context processor for admin flag and the anti-forgery token
    @app.context_processor
    def inject_template_globals():
        from flask_login import current_user
        from ecobuddy.context import issue_token
        is_admin = bool(current_user.is_authenticated and current_user.is_admin)
        return dict(is_admin=is_admin, csrf_token=issue_token)

    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        from ecobuddy.models import User
        return db.session.get(User, int(user_id))

    # Create database tables
    with app.app_context():
        os.makedirs(app.instance_path, exist_ok=True)
        db.create_all()
        if app.config['SEED_DEFAULT_CATEGORIES']:
            _ensure_default_categories(app)

    return app


def _ensure_default_categories(app):
    """Ensure the default facility categories exist."""
    from ecobuddy.models import Category

    existing = {c.name for c in Category.query.all()}
    missing = [name for name in app.config['DEFAULT_CATEGORIES'] if name not in existing]
    if not missing:
        return

    for name in missing:
        db.session.add(Category(name=name))
    try:
        db.session.commit()
        logger.info('Created default categories: %s', ', '.join(missing))
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Could not create default categories')
