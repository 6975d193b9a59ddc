"""
Phrase collection persistence keyed by sync key.

Each collection is one JSON string under ``phrases:<syncKey>``. Writes
overwrite unconditionally (last write wins); there is no merge or
version check.
"""

import json
import logging
from typing import Any, List

from app.config.settings import get_settings
from app.core.exceptions import StoreError
from app.core.store_client import KeyValueStore

logger = logging.getLogger(__name__)


class PhraseSyncService:
    """Loads and saves whole phrase collections in the remote store."""

    def __init__(self, store: KeyValueStore, key_prefix: str | None = None):
        self.store = store
        self.key_prefix = key_prefix if key_prefix is not None else get_settings().store.key_prefix

    def storage_key(self, sync_key: str) -> str:
        return f"{self.key_prefix}{sync_key}"

    async def load_phrases(self, sync_key: str) -> List[Any]:
        """
        Load the collection stored for ``sync_key``.

        An absent key is an empty collection, not an error.

        Raises:
            StoreError: If the store fails or holds an undecodable value
        """
        data = await self.store.get(self.storage_key(sync_key))
        if not data:
            return []

        try:
            phrases = json.loads(data)
        except ValueError as e:
            logger.error(f"Stored collection for {sync_key} is not valid JSON: {e}")
            raise StoreError("Stored phrase collection is corrupted", details={"sync_key": sync_key}) from e

        return phrases if isinstance(phrases, list) else []

    async def save_phrases(self, sync_key: str, phrases: List[Any]) -> None:
        """
        Overwrite the collection stored for ``sync_key``.

        Raises:
            StoreError: If the store write fails
        """
        payload = json.dumps(phrases, ensure_ascii=False)
        await self.store.set(self.storage_key(sync_key), payload)
        logger.debug(f"Saved {len(phrases)} phrases for {sync_key}")
