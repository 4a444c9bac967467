from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import voice_cart.db as db
from voice_cart.main import app
from voice_cart.models import Base
from voice_cart.routes import limiter
from voice_cart.services.shopping_list import ShoppingListStore
from voice_cart.transcription import get_transcriber


class FakeClock:
    """Settable clock for ShoppingListStore; each call moves one second forward."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 15, 12, 0, 0)

    def __call__(self):
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def engine():
    """In-memory SQLite shared across connections via StaticPool."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(db_session, clock):
    """ShoppingListStore over the in-memory database with a fake clock."""
    return ShoppingListStore(db_session, clock=clock)


@pytest.fixture
def fake_transcriber():
    """Stand-in for the AssemblyAI client; set .text or .error per test."""

    class _FakeTranscriber:
        def __init__(self):
            self.text = ""
            self.error = None
            self.calls = []

        def transcribe(self, audio_base64, language="en"):
            self.calls.append((audio_base64, language))
            if self.error is not None:
                raise self.error
            return self.text

    return _FakeTranscriber()


@pytest.fixture
def client(engine, fake_transcriber):
    """Shared FastAPI TestClient using an in-memory SQLite DB.

    Uses StaticPool so all connections share the same in-memory database.
    The transcriber dependency is replaced with fake_transcriber and rate
    limiting is disabled.
    """
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the db module used by the app (startup creates tables on it)
    original_engine, original_session_local = db.engine, db.SessionLocal
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    def override_get_db():
        db_sess = TestingSessionLocal()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    app.dependency_overrides[get_transcriber] = lambda: fake_transcriber

    limiter.enabled = False
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    db.engine = original_engine
    db.SessionLocal = original_session_local
