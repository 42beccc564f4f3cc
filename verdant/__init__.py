"""
Flask Application Factory

This module implements the application factory pattern for creating
Verdant application instances with different configurations.
"""

import logging
import os

from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from verdant.config import config
from verdant.extensions import db, limiter, migrate


def create_app(config_name='default', overrides=None):
    """
    Application factory function

    Args:
        config_name (str): Configuration name ('development', 'production', 'testing')
        overrides (dict): Optional config values applied last (tests, scripts)

    Returns:
        Flask: Configured Flask application instance
    """

    # Normalize config name
    config_name = (config_name or 'default').lower()

    app = Flask(__name__)

    # IMPORTANT: Instantiate the config object so @property values (like
    # ProductionConfig.SQLALCHEMY_DATABASE_URI) are evaluated correctly.
    cfg = config.get(config_name) or config['default']
    cfg_obj = cfg() if isinstance(cfg, type) else cfg
    app.config.from_object(cfg_obj)
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    if config_name == 'production':
        if not app.config.get('SECRET_KEY'):
            app.logger.error('Production requires SECRET_KEY to be set via environment variable')
            raise RuntimeError('Missing SECRET_KEY in production')
        if not app.config.get('SQLALCHEMY_DATABASE_URI'):
            app.logger.error('Production requires DATABASE_URL (SQLALCHEMY_DATABASE_URI) to be set')
            raise RuntimeError('Missing DATABASE_URL in production')
    elif not app.config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = os.urandom(32)
        app.logger.warning('SECRET_KEY was missing; generated an ephemeral key for this process.')

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Import models so metadata is populated for migrations and create_all()
    from verdant import models  # noqa: F401

    register_blueprints(app)
    register_error_handlers(app)
    register_template_processors(app)
    register_shell_context(app)
    register_cli_commands(app)

    @app.teardown_request
    def _rollback_on_error(exc):
        """Never leak a failed transaction into the next request."""
        if exc is not None:
            db.session.rollback()

    app.logger.debug('Verdant application created with config: %s', config_name)
    return app


def configure_logging(app):
    """Apply LOG_LEVEL to the app logger and the verdant.* module loggers."""
    level_name = str(app.config.get('LOG_LEVEL') or 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)

    package_logger = logging.getLogger('verdant')
    package_logger.setLevel(level)
    if not package_logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s in %(name)s: %(message)s'))
        package_logger.addHandler(handler)


def register_blueprints(app):
    """Register Flask blueprints"""

    from verdant.routes.api import api_bp
    from verdant.routes.health import health_bp
    from verdant.routes.main import main_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(health_bp)  # No prefix - accessible at /health


def _wants_json():
    return request.path.startswith('/api/') or request.path.startswith('/health')


def register_error_handlers(app):
    """JSON envelope for the API, HTML pages elsewhere."""

    @app.errorhandler(HTTPException)
    def http_error(error):
        if _wants_json():
            return jsonify({'success': False, 'error': error.description or error.name}), error.code
        if error.code == 404:
            return render_template('errors/404.html', message=error.description), 404
        return error

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled exception (500): %s', error)
        if _wants_json():
            return jsonify({'success': False, 'error': 'Internal server error'}), 500
        return render_template('errors/500.html'), 500


def register_template_processors(app):
    """Register template filters and globals"""

    from verdant.utils.timestamps import format_ms

    app.add_template_filter(format_ms, 'datefmt')

    @app.context_processor
    def inject_site_config():
        return {
            'site_name': app.config['SITE_NAME'],
            'site_description': app.config['SITE_DESCRIPTION'],
        }


def register_shell_context(app):
    """Register shell context for flask shell command"""

    @app.shell_context_processor
    def make_shell_context():
        from verdant.models import Bed, JournalEntry, Planting, Task, UserProfile

        return {
            'db': db,
            'Bed': Bed,
            'Planting': Planting,
            'Task': Task,
            'JournalEntry': JournalEntry,
            'UserProfile': UserProfile,
        }


def register_cli_commands(app):
    """Register custom Flask CLI commands."""
    from verdant.cli import advise_command, companions_command, init_db_command, seed_demo_command

    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_demo_command)
    app.cli.add_command(advise_command)
    app.cli.add_command(companions_command)
