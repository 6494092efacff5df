"""Application settings.

Values come from environment variables where set, otherwise the defaults
below. ``create_app`` also accepts keyword overrides.
"""
import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'replace_with_a_long_random_string')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///finance.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 'sha256' keeps the unsalted digest existing accounts were created with,
    # 'werkzeug' switches new hashes and checks to werkzeug's salted format.
    PASSWORD_HASH_SCHEME = os.environ.get('PASSWORD_HASH_SCHEME', 'sha256')

    RECENT_TRANSACTION_COUNT = int(os.environ.get('RECENT_TRANSACTION_COUNT', '10'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Create tables and seed categories when the app starts
    INIT_DB_ON_STARTUP = os.environ.get('INIT_DB_ON_STARTUP', '1') == '1'


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'WARNING'
