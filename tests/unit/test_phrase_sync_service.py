"""
Unit tests for phrase collection persistence
"""
import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.exceptions import StoreError
from app.core.store_client import MemoryStore, RedisStore
from app.services.phrase_sync_service import PhraseSyncService


class BrokenRedis:
    """Stands in for a redis.asyncio client whose server is down."""

    async def get(self, key):
        raise RedisConnectionError("Connection refused")

    async def set(self, key, value):
        raise RedisConnectionError("Connection refused")

    async def ping(self):
        raise RedisConnectionError("Connection refused")

    async def aclose(self):
        return None


@pytest.mark.asyncio
async def test_absent_key_loads_empty_collection():
    service = PhraseSyncService(MemoryStore())
    assert await service.load_phrases("abc123") == []


@pytest.mark.asyncio
async def test_save_uses_prefixed_key_and_json():
    store = MemoryStore()
    service = PhraseSyncService(store)
    phrases = [{"id": "1", "english": "Thank you", "vietnamese": "Cảm ơn"}]

    await service.save_phrases("abc123", phrases)

    raw = await store.get("phrases:abc123")
    assert json.loads(raw) == phrases
    assert "Cảm ơn" in raw


@pytest.mark.asyncio
async def test_save_overwrites_without_merge():
    service = PhraseSyncService(MemoryStore())
    await service.save_phrases("abc123", [{"id": "1"}, {"id": "2"}])
    await service.save_phrases("abc123", [{"id": "3"}])

    assert await service.load_phrases("abc123") == [{"id": "3"}]


@pytest.mark.asyncio
async def test_corrupted_value_raises_store_error():
    store = MemoryStore()
    await store.set("phrases:abc123", "{not json")

    with pytest.raises(StoreError):
        await PhraseSyncService(store).load_phrases("abc123")


@pytest.mark.asyncio
async def test_redis_failures_surface_as_store_error():
    store = RedisStore(redis_url="redis://localhost:6379/0")
    store.redis_client = BrokenRedis()
    service = PhraseSyncService(store)

    with pytest.raises(StoreError):
        await service.load_phrases("abc123")
    with pytest.raises(StoreError):
        await service.save_phrases("abc123", [])
    assert await store.ping() is False


@pytest.mark.asyncio
async def test_redis_client_created_once(monkeypatch):
    created = []

    def fake_from_url(url, **kwargs):
        created.append(url)
        return BrokenRedis()

    monkeypatch.setattr("app.core.store_client.aioredis.from_url", fake_from_url)
    store = RedisStore(redis_url="redis://example:6379/0")

    first = await store._get_client()
    second = await store._get_client()

    assert first is second
    assert created == ["redis://example:6379/0"]

    await store.close()
    assert store.redis_client is None


def test_redacted_url_hides_password():
    store = RedisStore(redis_url="redis://:s3cret@cache:6379/0")
    assert "s3cret" not in store._redacted_url()


@pytest.mark.asyncio
async def test_unusable_redis_url_raises_store_error():
    store = RedisStore(redis_url="http://not-a-redis-host:6379")

    with pytest.raises(StoreError):
        await store.get("phrases:abc123")
    with pytest.raises(StoreError):
        await store.set("phrases:abc123", "[]")
    assert await store.ping() is False
