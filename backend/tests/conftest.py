import os
import random
import sys
import pytest

# Ensure the backend root (containing the `drawguess` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from drawguess import create_app, socketio
from drawguess.services.games.registry import RoomRegistry
from drawguess.services.games.scheduler import TurnScheduler
from drawguess.services.games.scoring import GuessAdjudicator
from drawguess.services.games.timers import TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    ROUND_DURATION_SEC = 60
    MAX_ROUNDS = 5
    GUESS_POINTS = 10
    DRAWER_POINTS = 5
    END_ROUND_ON_DRAWER_LEAVE = True
    LOG_LEVEL = 'DEBUG'


class ManualTimer:
    """Countdown clock stepped by hand instead of by a background task."""

    def __init__(self):
        self.running = []

    def start(self, callback):
        handle = TimerHandle()
        self.running.append((handle, callback))
        return handle

    def advance(self, ticks=1):
        for _ in range(ticks):
            for handle, callback in list(self.running):
                if not handle.cancelled:
                    callback(handle)
            self.running = [(h, cb) for h, cb in self.running if not h.cancelled]

    @property
    def active(self):
        return [h for h, _ in self.running if not h.cancelled]


class RecordingGateway:
    """Stands in for BroadcastGateway and remembers every emit."""

    def __init__(self):
        self.sent = []

    def to_room(self, room_id, event, payload):
        self.sent.append(('room', room_id, event, payload))

    def to_room_except(self, room_id, sender, event, payload):
        self.sent.append(('room_except', room_id, event, payload))

    def to_connection(self, connection_id, event, payload):
        self.sent.append(('direct', connection_id, event, payload))

    def relay_drawing(self, room_id, sender, stroke_data):
        self.to_room_except(room_id, sender, 'drawing', stroke_data)

    def events(self, name):
        return [s for s in self.sent if s[2] == name]

    def payloads(self, name):
        return [s[3] for s in self.sent if s[2] == name]

    def clear(self):
        self.sent = []


@pytest.fixture()
def manual_timer():
    return ManualTimer()


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def registry():
    return RoomRegistry()


@pytest.fixture()
def scheduler(registry, gateway, manual_timer):
    return TurnScheduler(registry, gateway, manual_timer, rng=random.Random(7))


@pytest.fixture()
def adjudicator(registry, gateway):
    return GuessAdjudicator(registry, gateway)


@pytest.fixture()
def flask_app(manual_timer):
    application = create_app(TestConfig, timer=manual_timer)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
