import random

import pytest
from fastapi.testclient import TestClient

from wordchain.config import Settings
from wordchain.dictionary import DictionaryService
from wordchain.main import create_app
from wordchain.managers.game import GameEngine
from wordchain.managers.store import SessionStore, UserRegistry

T0 = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += int(seconds * 1000)


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    async def game_state(self, session_id, game):
        self.sent.append((session_id, game))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture(scope='session')
def dictionary():
    return DictionaryService()


@pytest.fixture()
def store():
    return SessionStore()


@pytest.fixture()
def users():
    return UserRegistry()


@pytest.fixture()
def engine(dictionary, store, users, clock):
    return GameEngine(dictionary, store=store, users=users, clock=clock, rng=random.Random(7))


@pytest.fixture()
def settings(tmp_path):
    return Settings(public_dir=tmp_path / 'public')


@pytest.fixture()
def web_app(settings, engine):
    app = create_app(settings, engine=engine)
    app.state.broadcaster = RecordingBroadcaster()
    return app


@pytest.fixture()
def client(web_app):
    return TestClient(web_app)
