import os
import random
import sys
import pytest

# Ensure the backend root (containing the `treasure_hunt` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from treasure_hunt import create_app, socketio
from treasure_hunt.services.game import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    GRID_SIZE = 10
    TREASURE_COUNT = 5
    WIN_CONDITION = 3
    RESET_DELAY_SEC = 0
    CORS_ORIGINS = '*'
    STREAM_ENABLED = False
    STREAM_HOST = '127.0.0.1'
    STREAM_PORT = 0
    STREAM_OUTBOX_LIMIT = 64


class FakeConnection:
    """Records every event the session sends to it."""

    def __init__(self):
        self.events = []

    def send(self, event):
        self.events.append(event)

    def types(self):
        return [e['type'] for e in self.events]

    def of_type(self, kind):
        return [e for e in self.events if e['type'] == kind]

    def clear(self):
        self.events.clear()


class RecordingScheduler:
    """Stands in for the reset timer; tests fire callbacks by hand."""

    def __init__(self):
        self.calls = []

    def __call__(self, delay, callback):
        self.calls.append((delay, callback))

    def fire_all(self):
        calls, self.calls = self.calls, []
        for _, callback in calls:
            callback()


@pytest.fixture()
def scheduler():
    return RecordingScheduler()


@pytest.fixture()
def session(scheduler):
    return GameSession(
        grid_size=10,
        treasure_count=5,
        win_condition=3,
        reset_delay=5,
        schedule=scheduler,
        rng=random.Random(1234),
    )


@pytest.fixture()
def make_connection():
    return FakeConnection


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


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
def app_with():
    """Builds an app whose TestConfig has the given overrides."""
    def _build(**overrides):
        return create_app(type('OverrideConfig', (TestConfig,), overrides))
    return _build
