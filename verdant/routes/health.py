"""
Health check endpoints for monitoring the application and its database.
"""

from datetime import datetime, timezone
import os

from flask import Blueprint, jsonify, current_app
from sqlalchemy import inspect, text

from verdant.extensions import db


health_bp = Blueprint('health', __name__)

REQUIRED_TABLES = {'beds', 'plantings', 'tasks', 'journal_entries', 'user_profiles'}


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


@health_bp.route('/health')
def health_check():
    """
    Lightweight liveness probe. Does NOT touch the database.
    """
    return jsonify({
        'status': 'healthy',
        'timestamp': _now_iso(),
        'service': 'verdant',
        'pid': os.getpid(),
    }), 200


@health_bp.route('/health/ready')
def readiness_check():
    """
    Readiness probe: database reachable and all garden tables present.
    """
    checks = {
        'application': 'healthy',
        'database': 'unknown',
        'timestamp': _now_iso(),
    }
    status_code = 200

    try:
        db.session.execute(text('SELECT 1'))
        db.session.commit()
        checks['database'] = 'healthy'
    except Exception as exc:
        db.session.rollback()
        checks['database'] = 'unhealthy'
        checks['database_error'] = str(exc)
        status_code = 503
        current_app.logger.error('Database health check failed: %s', exc, exc_info=True)

    if checks['database'] == 'healthy':
        tables = set(inspect(db.engine).get_table_names())
        missing = sorted(REQUIRED_TABLES - tables)
        if missing:
            checks['schema'] = 'incomplete'
            checks['missing_tables'] = missing
            status_code = 503
        else:
            checks['schema'] = 'complete'

    checks['overall'] = 'healthy' if status_code == 200 else 'unhealthy'
    return jsonify(checks), status_code
