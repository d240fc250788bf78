"""Shared pytest fixtures for the EmailSpy API."""

from __future__ import annotations

import sys
from pathlib import Path

import mongomock
import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from emailspy import database  # noqa: E402
from emailspy.config import Config  # noqa: E402
from emailspy.main import create_app  # noqa: E402
from emailspy.services import engine_service  # noqa: E402


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class EngineRecorder:
    """Stands in for ``requests.post`` and remembers every call."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.calls = []
        self.response = response or FakeResponse()
        self.error = error

    def __call__(self, url, json=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Provide an isolated in-memory MongoDB database for each test."""
    test_db_name = "test_emailspy"
    monkeypatch.setenv("MONGODB_DATABASE", test_db_name)

    client = mongomock.MongoClient()
    db = client[test_db_name]

    monkeypatch.setattr(database, "get_mongo_client", lambda: client)
    monkeypatch.setattr(database, "get_database", lambda: db)

    yield db

    client.drop_database(test_db_name)


@pytest.fixture
def config() -> Config:
    return Config(
        engine_base_url="https://n8n.example.test",
        public_base_url="https://emailspy.example.test",
        background_sweep=False,
    )


@pytest.fixture
def install_engine(monkeypatch: pytest.MonkeyPatch):
    """Replace the outbound engine request with a recorder."""

    def _install(status_code: int = 200, error: Exception | None = None) -> EngineRecorder:
        recorder = EngineRecorder(response=FakeResponse(status_code=status_code), error=error)
        monkeypatch.setattr(engine_service.requests, "post", recorder)
        return recorder

    return _install


@pytest.fixture
def engine(install_engine) -> EngineRecorder:
    return install_engine()


@pytest.fixture
def app(config: Config):
    application = create_app(config)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()
