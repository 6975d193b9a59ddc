"""
Two devices syncing through the real endpoints over an ASGI transport.
"""
import asyncio

import httpx
import pytest

from app.client import LocalCache, PhraseSyncClient, SyncCoordinator, SyncRequestError

DEBOUNCE = 0.05


def device(app, tmp_path, name, key):
    api = PhraseSyncClient("http://test", transport=httpx.ASGITransport(app=app))
    cache = LocalCache(tmp_path / f"{name}.json")
    return SyncCoordinator(api, cache, debounce_seconds=DEBOUNCE, key_factory=lambda: key)


@pytest.mark.asyncio
async def test_phrase_added_on_one_device_reaches_another(app, tmp_path):
    laptop = device(app, tmp_path, "laptop", "laptop001")
    phone = device(app, tmp_path, "phone", "phone0001")
    await laptop.init()
    await phone.init()

    await laptop.add_phrase("Hello")
    await laptop.add_phrase("Thank you")
    await laptop.flush()

    phrases = await phone.set_sync_key(laptop.sync_key)

    assert [p.english for p in phrases] == ["Thank you", "Hello"]
    assert phrases[0].vietnamese == "Xin chào"

    await laptop.api.aclose()
    await phone.api.aclose()


@pytest.mark.asyncio
async def test_offline_phrases_are_uploaded_on_next_start(app, tmp_path, memory_store):
    cache = LocalCache(tmp_path / "device.json")
    cache.store_sync_key("offline01")
    cache.store_phrases([{
        "id": "local-1", "english": "Water", "vietnamese": "Nước", "phonetic": "nook↗",
        "category": "food", "createdAt": 1700000000000, "reviewCount": 0, "lastReviewed": None,
    }])

    api = PhraseSyncClient("http://test", transport=httpx.ASGITransport(app=app))
    coordinator = SyncCoordinator(api, cache, debounce_seconds=DEBOUNCE)
    await coordinator.init()

    stored = await memory_store.get("phrases:offline01")
    assert '"english": "Water"' in stored
    await api.aclose()


@pytest.mark.asyncio
async def test_client_surfaces_http_errors(app):
    async with PhraseSyncClient("http://test", transport=httpx.ASGITransport(app=app)) as api:
        with pytest.raises(SyncRequestError) as exc_info:
            await api.fetch_phrases("bad")

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid sync key format"


@pytest.mark.asyncio
async def test_client_surfaces_transport_errors():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    async with PhraseSyncClient("http://test", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(SyncRequestError) as exc_info:
            await api.push_phrases("abc123", [])

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_rate_limited_push_is_reported(app, tmp_path, limiters):
    coordinator = device(app, tmp_path, "busy", "busykey01")
    await coordinator.init()

    for _ in range(60):
        limiters["/phrases"].allow("127.0.0.1")

    await coordinator.add_phrase("Hello")
    await asyncio.sleep(DEBOUNCE * 3)

    assert not coordinator.is_syncing
    assert [p.english for p in coordinator.phrases] == ["Hello"]
    await coordinator.api.aclose()
