"""
Basic test to verify the project setup is working correctly.
"""

from fastapi.testclient import TestClient
from app.main import app, create_app
from app.config.settings import Settings, RedisSettings
from app.core.store_client import MemoryStore


def test_app_creation():
    """Test that the FastAPI app can be created successfully."""
    assert app is not None
    assert app.title == "Vietnamese Phrase Sync"


def test_root_endpoint():
    """Test the root endpoint returns expected response."""
    client = TestClient(create_app(store=MemoryStore()))
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "version" in data
    assert data["status"] == "running"


def test_health_endpoint_reports_store():
    client = TestClient(create_app(store=MemoryStore()))
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["details"]["store"]["backend"] == "MemoryStore"


def test_unknown_route_uses_error_format():
    client = TestClient(create_app(store=MemoryStore()))
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


def test_default_limits():
    settings = Settings()
    assert settings.rate_limit.phrases_max_requests == 60
    assert settings.rate_limit.phrases_window_seconds == 60
    assert settings.rate_limit.translate_max_requests == 20
    assert settings.sync.max_phrases == 10000


def test_redis_url_override(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://cache.internal:6380/2")
    assert RedisSettings().url == "redis://cache.internal:6380/2"


def test_redis_url_from_parts(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("REDIS_HOST", "db")
    monkeypatch.setenv("REDIS_PASSWORD", "pw")
    assert RedisSettings().url == "redis://:pw@db:6379/0"


def test_lifespan_closes_store():
    closed = []

    class TrackingStore(MemoryStore):
        async def close(self):
            closed.append(True)

    app = create_app(store=TrackingStore())
    with TestClient(app) as client:
        assert client.get("/").status_code == 200

    assert closed == [True]
