"""
Configuration settings for the EcoBuddy facility locator
"""
import os


class Config:
    """Flask application configuration"""

    # Flask secret key for sessions and anti-forgery tokens
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Database configuration (relative sqlite paths resolve inside the instance folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///ecobuddy.sqlite'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Listing and search sizes
    FACILITY_PAGE_SIZE = 10
    SEARCH_RESULT_LIMIT = 10
    PAGE_WINDOW = 5

    # Anti-forgery tokens expire after an hour
    WTF_CSRF_TIME_LIMIT = 3600

    # Map defaults (Salford University)
    DEFAULT_MAP_CENTER = (53.483959, -2.244644)
    DEFAULT_MAP_ZOOM = 13

    # Seed the category table on first start
    SEED_DEFAULT_CATEGORIES = os.environ.get('SEED_DEFAULT_CATEGORIES', '1') == '1'
    DEFAULT_CATEGORIES = [
        'Recycling bin',
        'E-scooter',
        'Bike share',
        'Electric vehicle charger',
        'Public charging point',
    ]


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SEED_DEFAULT_CATEGORIES = False
    LOG_LEVEL = 'WARNING'
