"""Test configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path

from verdant import create_app
from verdant.extensions import db as _db


@pytest.fixture
def app():
    """Create application for testing."""
    db_fd, db_path = tempfile.mkstemp()

    app = create_app('testing', {
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SERVER_NAME': 'localhost',
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()
        _db.engine.dispose()

    import os
    os.close(db_fd)
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def client(app):
    """Test client for making requests."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """CLI test runner."""
    return app.test_cli_runner()


@pytest.fixture
def db(app):
    """Database fixture."""
    return _db


@pytest.fixture
def bed(client):
    """A bed created through the API."""
    resp = client.post('/api/beds', json={'name': 'North Bed', 'width': 4, 'height': 8})
    assert resp.status_code == 200
    return resp.get_json()['data']
