import pytest
from fastapi.testclient import TestClient

from taskhub.server.app import app
from taskhub.server.settings import get_settings

client = TestClient(app)


@pytest.fixture
def unreachable_database(tmp_path, monkeypatch):
    """Point the app at a SQLite file whose directory does not exist."""
    monkeypatch.setenv("TASKHUB_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/missing/taskhub.db")
    monkeypatch.setenv("TASKHUB_AUTH_TOKEN", "test-token")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    app.state.db_engine = None
    app.state.db_session_factory = None


def test_health_without_database():
    app.state.db_session_factory = None
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["database"] == "disabled"
    assert body["uptime"] >= 0
    assert "timestamp" in body


def test_db_routes_unavailable_without_database():
    app.state.db_session_factory = None
    response = client.get("/api/users/u1/get")
    assert response.status_code == 503
    assert "TASKHUB_DATABASE_URL" in response.json()["detail"]


def test_starts_and_reports_unreachable_database(unreachable_database):
    with TestClient(app) as running:
        response = running.get("/api/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "fail"
    assert body["database"] == "unavailable"
