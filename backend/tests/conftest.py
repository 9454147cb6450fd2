import os
import sys
import pytest

# Ensure the backend root (containing the `timer_challenge` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from timer_challenge import create_app, socketio
from timer_challenge.services.challenges import ManualScheduler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    TICK_INTERVAL_MS = 10
    TICK_MODE = 'fixed'
    TIMER_HEARTBEAT_SEC = 0
    CHALLENGES = [
        ('Easy', 1),
        ('Not easy', 5),
        ('Getting tough', 10),
        ('Pros only', 15),
    ]
    CORS_ORIGINS = ['http://localhost:5173']


class RecordingSurface:
    """Overlay surface that remembers what it was asked to show."""

    def __init__(self):
        self.shown = []
        self.hidden = 0
        self.visible = False

    def show(self, payload):
        self.shown.append(payload)
        self.visible = True

    def hide(self):
        self.hidden += 1
        self.visible = False

    @property
    def last(self):
        return self.shown[-1] if self.shown else None


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def scheduler(flask_app):
    return flask_app.extensions['tick_scheduler']


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
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture()
def surface():
    return RecordingSurface()


@pytest.fixture()
def surfaces():
    """Factory handing out one RecordingSurface per challenge key."""
    created = {}

    def factory(key):
        created[key] = RecordingSurface()
        return created[key]

    factory.created = created
    return factory
