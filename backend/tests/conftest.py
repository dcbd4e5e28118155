import os
import sys
import pytest

# Ensure the backend root (containing the `typerace` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from typerace import create_app, socketio
from typerace.services.race import RoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    RACE_NAMESPACE = '/'
    HOST_ONLY_CONTROLS = False
    EMIT_REJECTIONS = False
    ROOM_LOCK_STRIPES = 8
    LOG_LEVEL = 'DEBUG'
    SOCKETIO_LOGGER = False


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def advance(self, ms=1000):
        self.now += ms
        return self.now

    def __call__(self):
        return self.now


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    def publish(self, room_id, snapshot):
        self.sent.append((room_id, snapshot))

    def for_room(self, room_id):
        return [snapshot for rid, snapshot in self.sent if rid == room_id]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def store(broadcaster, clock):
    return RoomStore(broadcaster=broadcaster, clock=clock, lock_stripes=4)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def make_app():
    """Build an application with some TestConfig settings overridden."""
    def build(**overrides):
        config_class = type('OverriddenConfig', (TestConfig,), overrides)
        return create_app(config_class)
    return build


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Connect any number of Socket.IO test clients; all are disconnected afterwards."""
    created = []

    def connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        created.append(test_client)
        return test_client

    yield connect
    for test_client in created:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()


@pytest.fixture()
def sid_of():
    """Return the server-side session id (the player id) of a test client."""
    def lookup(test_client, namespace='/'):
        return socketio.server.manager.sid_from_eio_sid(test_client.eio_sid, namespace)
    return lookup


@pytest.fixture()
def room_states():
    """Return the room_state payloads a test client has received since the last call."""
    def collect(test_client):
        return [pkt['args'][0] for pkt in test_client.get_received() if pkt['name'] == 'room_state']
    return collect
