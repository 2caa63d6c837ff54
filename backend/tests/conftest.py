import os
import random
import sys
import pytest

# Ensure the backend root (containing the `geoguess` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from geoguess import create_app, socketio
from geoguess.services.games.words import WordPool


# Every word is five letters so any pool word is a valid-length guess
COUNTRIES = ['Spain', 'Italy', 'China', 'Chile', 'Japan', 'Kenya', 'India', 'Egypt', 'Nepal', 'Ghana']
CAPITALS = ['Paris', 'Tokyo', 'Cairo', 'Seoul', 'Dhaka', 'Accra', 'Sucre', 'Quito', 'Hanoi']


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    MAX_ATTEMPTS = 6
    ROOM_CODE_LENGTH = 6
    MAX_LOBBY_MESSAGES = 50
    MAX_ROOM_MESSAGES = 50
    MAX_MESSAGE_LENGTH = 500
    VALIDATE_GUESSES = True
    WORD_POOL_PATH = ''
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def word_pool():
    return WordPool(COUNTRIES, CAPITALS, rng=random.Random(1234))


@pytest.fixture()
def flask_app(word_pool):
    application = create_app(TestConfig, word_pool=word_pool)
    with application.app_context():
        yield application


@pytest.fixture()
def services(flask_app):
    return flask_app.extensions['geoguess']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    """Factory for extra Socket.IO clients; all are disconnected at teardown."""
    created = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()
