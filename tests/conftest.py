"""
Shared fixtures: an app wired to an in-memory store, fresh limiters and a
translation backend answering from an httpx mock transport.
"""
import json

import httpx
import pytest

from app.config.settings import TranslationSettings
from app.core.rate_limiter import FixedWindowRateLimiter
from app.core.store_client import MemoryStore
from app.main import create_app
from app.services.translation_service import TranslationService


class FakeClock:
    """Manually advanced monotonic clock for window tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def anthropic_reply(payload: dict | str, status_code: int = 200) -> httpx.Response:
    text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    return httpx.Response(status_code, json={"content": [{"type": "text", "text": text}]})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def limiters(clock):
    return {
        "/phrases": FixedWindowRateLimiter(60, 60, clock=clock),
        "/translate": FixedWindowRateLimiter(20, 60, clock=clock),
    }


@pytest.fixture
def translation_requests():
    return []


@pytest.fixture
def translation_service(translation_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        translation_requests.append(json.loads(request.content))
        return anthropic_reply({"vietnamese": "Xin chào", "phonetic": "sin→ chow↘", "category": "greetings"})

    config = TranslationSettings(api_key="test-key")
    return TranslationService(config, transport=httpx.MockTransport(handler))


@pytest.fixture
def app(memory_store, limiters, translation_service):
    return create_app(store=memory_store, limiters=limiters, translation_service=translation_service)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
async def async_client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
