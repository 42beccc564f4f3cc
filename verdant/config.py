"""
Configuration Module for the Verdant garden application

This module defines configuration classes for different environments:
- DevelopmentConfig: Local development with SQLite
- ProductionConfig: Production deployment with PostgreSQL
- TestingConfig: Automated testing configuration
"""

import os
import sys
from pathlib import Path


class Config:
    """Base configuration with common settings"""

    # Secret key for session management.
    # - In development, we load from .env (see wsgi.py) or you can set it explicitly.
    # - In production, the app factory enforces presence.
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Database configuration
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    # Server-rendered forms (settings page) are CSRF protected. API forms
    # opt out per instance and are fed from JSON bodies.
    WTF_CSRF_ENABLED = True

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Flask-Limiter
    RATELIMIT_ENABLED = os.environ.get('RATELIMIT_ENABLED', 'True').lower() == 'true'
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '300 per minute')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    SITE_NAME = 'Verdant'
    SITE_DESCRIPTION = "A bird's-eye view of your garden. See what's growing and what needs tending."

    # Single-user deployment: one profile row.
    PROFILE_ID = 'main'


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True
    TESTING = False

    # IMPORTANT (Windows): SQLAlchemy sqlite URLs must use forward slashes.
    _project_root = Path(__file__).resolve().parent.parent
    _default_db_path = (_project_root / 'verdant.db').resolve()

    _env_db_url = os.environ.get('DATABASE_URL')
    if _env_db_url and _env_db_url.strip().startswith('sqlite:'):
        _env_db_url = _env_db_url.replace('\\', '/')

    SQLALCHEMY_DATABASE_URI = _env_db_url or f"sqlite:///{_default_db_path.as_posix()}"

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    TESTING = False

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        """
        Production database URI, evaluated when the config object is loaded.

        - Hosting platforms may provide DATABASE_URL with a postgres:// prefix
        - SQLAlchemy requires postgresql://
        """
        db_uri = os.environ.get('DATABASE_URL')
        if not db_uri:
            print('FATAL: DATABASE_URL not set in environment', file=sys.stderr)
            return None

        if db_uri.startswith('postgres://'):
            db_uri = 'postgresql://' + db_uri[len('postgres://'):]

        return db_uri


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = True

    # In-memory SQLite for fast testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}

    SECRET_KEY = 'test-secret-key'
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    LOG_LEVEL = 'WARNING'


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
