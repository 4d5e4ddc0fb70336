import httpx
import pytest
from fastapi.testclient import TestClient

import http_client
from config import settings
from database import InMemoryWorkoutStore, get_workout_store
from main import app


@pytest.fixture(autouse=True)
def no_credentials(monkeypatch):
    """Every test starts without third-party keys."""
    monkeypatch.setattr(settings, "RAPIDAPI_KEY", "")
    monkeypatch.setattr(settings, "GOOGLE_API_KEY", "")
    monkeypatch.setattr(settings, "STRAVA_CLIENT_ID", "")
    monkeypatch.setattr(settings, "STRAVA_CLIENT_SECRET", "")


@pytest.fixture
def store():
    return InMemoryWorkoutStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_workout_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mock_http(monkeypatch):
    """Install a handler that answers every outgoing httpx request."""
    def install(handler):
        monkeypatch.setattr(
            http_client, "_client", httpx.Client(transport=httpx.MockTransport(handler))
        )
    return install
