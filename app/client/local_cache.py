"""
Device-local key/value storage for the sync key and phrase collection.

A single JSON file plays the part of browser localStorage. Every write
replaces the file atomically, so a failed write leaves the previously
committed contents intact. Failures are raised, never swallowed.
"""

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SYNC_KEY_ENTRY = "viet-sync-key"
PHRASES_ENTRY = "viet-phrases"
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class LocalCacheError(Exception):
    """Raised when the local cache cannot be written."""


class QuotaExceededError(LocalCacheError):
    """Raised when a write would exceed the storage quota."""

    def __init__(self, required_bytes: int, quota_bytes: int):
        super().__init__(
            f"Local storage quota exceeded: {required_bytes} bytes needed, {quota_bytes} allowed"
        )
        self.required_bytes = required_bytes
        self.quota_bytes = quota_bytes


class LocalCache:
    """String key/value entries persisted to one JSON file."""

    def __init__(self, path: str | os.PathLike, quota_bytes: int = DEFAULT_QUOTA_BYTES):
        self.path = Path(path).expanduser()
        self.quota_bytes = quota_bytes
        self._entries: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Could not read local cache {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def set_item(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key`` and flush to disk.

        Raises:
            QuotaExceededError: If the serialized entries exceed the quota
            LocalCacheError: If the file cannot be written
        """
        entries = dict(self._entries)
        entries[key] = value
        self._write(entries)
        self._entries = entries

    def remove_item(self, key: str) -> None:
        if key not in self._entries:
            return
        entries = {k: v for k, v in self._entries.items() if k != key}
        self._write(entries)
        self._entries = entries

    def _write(self, entries: Dict[str, str]) -> None:
        payload = json.dumps(entries, ensure_ascii=False).encode("utf-8")
        if len(payload) > self.quota_bytes:
            raise QuotaExceededError(len(payload), self.quota_bytes)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise LocalCacheError(f"Failed to write local cache {self.path}: {e}") from e

    def load_sync_key(self) -> Optional[str]:
        return self.get_item(SYNC_KEY_ENTRY)

    def store_sync_key(self, sync_key: str) -> None:
        self.set_item(SYNC_KEY_ENTRY, sync_key)

    def load_phrases(self) -> Optional[List[Dict[str, Any]]]:
        """Return the stored collection, or None when absent or unreadable."""
        raw = self.get_item(PHRASES_ENTRY)
        if raw is None:
            return None
        try:
            phrases = json.loads(raw)
        except ValueError:
            logger.warning("Stored phrases are not valid JSON; ignoring them")
            return None
        return phrases if isinstance(phrases, list) else None

    def store_phrases(self, phrases: List[Dict[str, Any]]) -> None:
        self.set_item(PHRASES_ENTRY, json.dumps(phrases, ensure_ascii=False))

