"""
Unit tests for the device-local cache
"""
import json

import pytest

from app.client.local_cache import (
    PHRASES_ENTRY,
    SYNC_KEY_ENTRY,
    LocalCache,
    LocalCacheError,
    QuotaExceededError,
)


def test_empty_cache_has_nothing(tmp_path):
    cache = LocalCache(tmp_path / "storage.json")
    assert cache.load_sync_key() is None
    assert cache.load_phrases() is None


def test_values_survive_reload(tmp_path):
    path = tmp_path / "storage.json"
    cache = LocalCache(path)
    cache.store_sync_key("k3y9z0q1")
    cache.store_phrases([{"id": "1", "english": "Hello"}])

    reloaded = LocalCache(path)
    assert reloaded.load_sync_key() == "k3y9z0q1"
    assert reloaded.load_phrases() == [{"id": "1", "english": "Hello"}]

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert set(raw) == {SYNC_KEY_ENTRY, PHRASES_ENTRY}


def test_empty_list_is_stored(tmp_path):
    cache = LocalCache(tmp_path / "storage.json")
    cache.store_phrases([{"id": "1"}])
    cache.store_phrases([])
    assert LocalCache(tmp_path / "storage.json").load_phrases() == []


def test_quota_exceeded_propagates_and_keeps_committed_data(tmp_path):
    path = tmp_path / "storage.json"
    cache = LocalCache(path, quota_bytes=1024)
    cache.store_phrases([{"id": "1"}])

    with pytest.raises(QuotaExceededError) as exc_info:
        cache.store_phrases([{"id": str(i), "english": "x" * 50} for i in range(100)])

    assert exc_info.value.quota_bytes == 1024
    assert cache.load_phrases() == [{"id": "1"}]
    assert LocalCache(path).load_phrases() == [{"id": "1"}]


def test_write_failure_raises(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file")
    cache = LocalCache(blocker / "storage.json")

    with pytest.raises(LocalCacheError):
        cache.store_sync_key("abc123")


def test_corrupt_phrases_entry_reads_as_absent(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({PHRASES_ENTRY: "{oops", SYNC_KEY_ENTRY: "abc123"}))

    cache = LocalCache(path)
    assert cache.load_phrases() is None
    assert cache.load_sync_key() == "abc123"


def test_unreadable_file_starts_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("not json at all")
    assert LocalCache(path).load_sync_key() is None


def test_remove_item(tmp_path):
    cache = LocalCache(tmp_path / "storage.json")
    cache.store_sync_key("abc123")
    cache.remove_item(SYNC_KEY_ENTRY)
    assert cache.load_sync_key() is None
