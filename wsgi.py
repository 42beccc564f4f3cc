"""
WSGI Entry Point for the Verdant garden application

This module serves as the entry point for WSGI servers (like Gunicorn).
Environment variables must be set BEFORE this module is imported.
"""

import os
import sys

# Load .env ONLY for local development. In production, environment
# variables must be provided by the platform.
if os.environ.get('FLASK_CONFIG', '').lower() != 'production':
    from dotenv import load_dotenv

    load_dotenv(override=False)

from verdant import create_app

config_name = (os.getenv('FLASK_CONFIG') or os.getenv('FLASK_ENV') or 'development').lower()

if config_name == 'production':
    required_vars = {
        'SECRET_KEY': 'Required for session encryption and CSRF protection',
        'DATABASE_URL': 'Required for PostgreSQL connection',
    }
    missing_vars = [
        f"  {name}: {description}"
        for name, description in required_vars.items()
        if not os.getenv(name)
    ]
    if missing_vars:
        print('Missing required environment variables:\n' + '\n'.join(missing_vars), file=sys.stderr)
        raise RuntimeError('Missing required environment variables in production')

app = create_app(config_name)
