import os
import sys
import pytest

# Ensure the backend root (containing the `ludo_relay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from ludo_relay import create_app, socketio
from ludo_relay.services.rooms import RoomRegistry, TurnRelay


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SERVER_URL = None


class ScriptedDice:
    """Die that returns queued values, then 1 once the queue is empty."""

    def __init__(self):
        self.values = []

    def push(self, *values):
        self.values.extend(values)

    def __call__(self):
        return self.values.pop(0) if self.values else 1


def received(sio_client, name):
    """Payloads of every ``name`` event the test client got since the last call."""
    return [pkt['args'][0] for pkt in sio_client.get_received() if pkt['name'] == name]


@pytest.fixture()
def dice():
    return ScriptedDice()


@pytest.fixture()
def registry():
    return RoomRegistry(max_players=4, code_length=6)


@pytest.fixture()
def flask_app(registry, dice):
    relay = TurnRelay(registry, min_players=2, roller=dice)
    application = create_app(TestConfig, registry=registry, relay=relay)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients, one per simulated player."""
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
