import os
import sys
from datetime import datetime, timedelta, timezone
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, db, socketio
from scoreboard.services.state import ScoreState
from scoreboard.services.storage import MemoryStore
from scoreboard.services.timers import TimerHandle


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SCOREBOARD_LANES = 6
    SCOREBOARD_MAX_LEVEL = 20
    SCOREBOARD_TIMEZONE = 'Asia/Taipei'
    SCOREBOARD_STORAGE_KEY = 'classScoreboard.v1'
    STORAGE_BACKEND = 'sql'
    ROLLOVER_SCHEDULER_ENABLED = False
    VISIBILITY_DEBOUNCE_MS = 1000
    MUTATION_DEBOUNCE_MS = 0
    TIMER_HEARTBEAT_SEC = 0
    CORS_ORIGINS = ['http://localhost:5173']


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced wall clock, kept in whole milliseconds."""

    def __init__(self, start):
        self.ms = int(start.timestamp()) * 1000 + start.microsecond // 1000

    def now(self):
        return EPOCH + timedelta(milliseconds=self.ms)

    def now_ms(self):
        return self.ms

    def advance(self, ms):
        self.ms += ms


class FakeTimers:
    """Timer backend driven by a FakeClock; nothing fires until advance()."""

    def __init__(self, clock):
        self.clock = clock
        self.handles = []
        self.fired = []

    def start(self, delay_sec, callback, name='timer'):
        handle = TimerHandle(self.clock.now().timestamp() + delay_sec, callback, name)
        handle.deadline_ms = self.clock.now_ms() + round(delay_sec * 1000)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if h.pending]

    def delay_ms(self, handle):
        return handle.deadline_ms - self.clock.now_ms()

    def advance(self, ms):
        target = self.clock.now_ms() + ms
        while True:
            due = [h for h in self.pending if h.deadline_ms <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.deadline_ms)
            self.clock.ms = max(self.clock.ms, handle.deadline_ms)
            self.fired.append(handle.name)
            handle.fire()
        self.clock.ms = target


# 2024-05-10 09:30 in Asia/Taipei (UTC+8)
TAIPEI_MORNING = datetime(2024, 5, 10, 1, 30, tzinfo=timezone.utc)


@pytest.fixture()
def clock():
    return FakeClock(TAIPEI_MORNING)


@pytest.fixture()
def make_clock():
    return FakeClock


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def state(store, clock):
    score_state = ScoreState(store, clock=clock)
    score_state.load_or_initialize()
    return score_state


@pytest.fixture()
def timers(clock):
    return FakeTimers(clock)


@pytest.fixture()
def flask_app(clock):
    application = create_app(TestConfig, clock=clock)
    with application.app_context():
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
