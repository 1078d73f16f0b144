import os
import sys
import pytest

# Ensure the backend root (containing the `snakeboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from snakeboard import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_HMAC_SECRET = 'test-hmac-secret'
    LEADERBOARD_BACKEND = 'sql'
    LEADERBOARD_KEY = 'snake:top5'
    LEADERBOARD_SIZE = 5
    MAX_TICKS = 60000
    MAX_INPUTS = 20000
    RULES_VERSION = 'v1'
    CORS_ORIGINS = ['http://localhost:5173']


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import snakeboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def ticket(client):
    """Issue a real ticket through the API for player 'Alice'."""
    res = client.post('/api/session/new', json={'name': 'Alice'})
    assert res.status_code == 200
    return res.get_json()
