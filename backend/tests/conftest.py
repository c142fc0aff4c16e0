import os
import sys
import pytest

# Ensure the backend root (containing the `turnchat` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from turnchat import create_app, socketio
from turnchat.services.session import SessionCoordinator


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    MESSAGES_PER_TURN = 3
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/ws'
    LOG_LEVEL = 'DEBUG'


class RecordingSender:
    """Stands in for the socket transport; remembers every envelope per handle."""

    def __init__(self):
        self.sent = []
        self.broken = set()

    def __call__(self, handle, envelope):
        if handle in self.broken:
            raise ConnectionError(f'{handle} is gone')
        self.sent.append((handle, envelope))

    def to(self, handle, kind=None):
        return [env for h, env in self.sent if h == handle and (kind is None or env['type'] == kind)]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def session(sender):
    return SessionCoordinator(send=sender, messages_per_turn=3)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()
