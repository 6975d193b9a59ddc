"""
Device-side phrase sync coordinator.

Keeps the in-memory phrase collection, mirrors every change to the local
cache immediately, and pushes the whole collection to the server after a
quiet period. Runs on a single asyncio event loop.

The collection is held as the wire entries it was loaded with. Entries this
client cannot read are kept and pushed back unchanged; ``phrases`` is the
readable view over them.

Flows:
    init            remote wins when non-empty; otherwise the local copy is
                    adopted and pushed once. A failed fetch means local only.
    mutations       memory, then local cache, then a debounced push.
    set_sync_key    destructive switch to another key's collection.
    clear_all       pushes the empty list immediately, bypassing the debounce.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Set

from pydantic import ValidationError

from app.client.local_cache import LocalCache
from app.client.sync_api import PhraseSyncClient, SyncRequestError
from app.client.sync_key import generate_sync_key, is_valid_sync_key
from app.core.validation import MAX_TEXT_LENGTH
from app.schemas.phrase import Category, Phrase

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0


class InvalidSyncKeyError(ValueError):
    """Raised when a user-supplied sync key is blank or malformed."""


@dataclass
class AddPhraseResult:
    phrase: Phrase
    created: bool
    placeholder: bool = False


def placeholder_phrase(english: str) -> Phrase:
    """Stand-in shown when translation fails. Never stored."""
    return Phrase(
        english=english,
        vietnamese="[Translation unavailable]",
        phonetic="[Try again later]",
        category=Category.UNCATEGORIZED.value,
    )


def parse_phrases(entries: List[Any]) -> List[Phrase]:
    """Readable view over wire entries. Unreadable entries are left out."""
    phrases = []
    for entry in entries:
        try:
            phrases.append(Phrase.model_validate(entry))
        except ValidationError:
            continue
    return phrases


class SyncCoordinator:
    """
    Owns the phrase collection and its sync key on one device.

    Args:
        api: Client for the sync and translation endpoints
        cache: Local key/value cache
        debounce_seconds: Quiet period before a push
        key_factory: Produces the sync key on first run
    """

    def __init__(
        self,
        api: PhraseSyncClient,
        cache: LocalCache,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        key_factory: Callable[[], str] = generate_sync_key,
    ):
        self.api = api
        self.cache = cache
        self.debounce_seconds = debounce_seconds
        self._key_factory = key_factory

        self.sync_key: Optional[str] = None
        self.phrases: List[Phrase] = []
        self._entries: List[Any] = []
        # Bumped by set_sync_key; in-flight adds compare against it
        self._generation = 0
        self.is_syncing = False

        self._pending_push: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    # Init

    async def init(self) -> List[Phrase]:
        """Resolve the sync key and load the collection."""
        key = self.cache.load_sync_key()
        if not is_valid_sync_key(key):
            if key:
                logger.warning("Stored sync key is malformed; generating a new one")
            key = self._key_factory()
            self.cache.store_sync_key(key)
            logger.info(f"Generated sync key {key}")
        self.sync_key = key

        try:
            remote = await self.api.fetch_phrases(key)
        except SyncRequestError as e:
            # Remote unreachable: don't overwrite it with a possibly stale local copy
            logger.warning(f"Error loading phrases, using local copy: {e}")
            self._adopt(self.cache.load_phrases(), source="local")
            return self.phrases

        if remote:
            self._adopt(remote, source="remote")
            self._write_local()
            return self.phrases

        self._adopt(self.cache.load_phrases(), source="local")
        if self._entries:
            logger.info(f"Remote empty; pushing {len(self._entries)} local phrases")
            await self._push_now()
        return self.phrases

    # Queries

    def find_phrase(self, english: str) -> Optional[Phrase]:
        """Case-insensitive lookup by English text."""
        needle = english.strip().lower()
        for phrase in self.phrases:
            if phrase.english.lower() == needle:
                return phrase
        return None

    # Mutations

    async def add_phrase(self, english: str) -> AddPhraseResult:
        """
        Translate and store a new phrase, or surface the existing one.

        Raises:
            ValueError: If the text is blank or longer than 500 characters
            LocalCacheError: If the local write fails; the phrase is still
                kept in memory and will be pushed
        """
        text = english.strip()
        if not text:
            raise ValueError("Phrase text cannot be empty")
        if len(text) > MAX_TEXT_LENGTH:
            raise ValueError(f"Phrase text is too long (max {MAX_TEXT_LENGTH} characters)")

        existing = self.find_phrase(text)
        if existing is not None:
            return AddPhraseResult(phrase=existing, created=False)

        generation = self._generation
        try:
            translation = await self.api.translate(text)
        except SyncRequestError as e:
            logger.error(f"Translation error: {e}")
            return AddPhraseResult(phrase=placeholder_phrase(text), created=False, placeholder=True)

        phrase = Phrase(
            english=text,
            vietnamese=translation.vietnamese,
            phonetic=translation.phonetic,
            category=translation.category,
        )

        # set_sync_key ran while translating; this text was meant for the previous key
        if self._generation != generation:
            logger.warning(f"Sync key changed during translation; not adding '{text}'")
            return AddPhraseResult(phrase=phrase, created=False)

        # Another add for the same text may have finished while we waited
        existing = self.find_phrase(text)
        if existing is not None:
            return AddPhraseResult(phrase=existing, created=False)

        self._commit([phrase.to_wire(), *self._entries])
        return AddPhraseResult(phrase=phrase, created=True)

    def delete_phrase(self, phrase_id: str) -> bool:
        remaining = [
            entry for entry in self._entries
            if not (isinstance(entry, dict) and entry.get("id") == phrase_id)
        ]
        if len(remaining) == len(self._entries):
            return False
        self._commit(remaining)
        return True

    async def clear_all(self) -> None:
        """Empty the collection everywhere, pushing right away."""
        self._cancel_pending_push()
        self._set_entries([])
        try:
            self._write_local()
        finally:
            await self._push_now()

    async def set_sync_key(self, new_key: str) -> List[Phrase]:
        """
        Switch to another sync key and adopt its collection.

        Unsynced changes under the previous key are discarded. If the
        fetch fails the key switch stands and the collection is kept.

        Raises:
            InvalidSyncKeyError: If the key is blank or malformed
        """
        key = (new_key or "").strip()
        if not key:
            raise InvalidSyncKeyError("Sync key is required")
        if not is_valid_sync_key(key):
            raise InvalidSyncKeyError("Invalid sync key format")

        # A pending push would write the old collection under the new key
        self._cancel_pending_push()
        self.cache.store_sync_key(key)
        self.sync_key = key
        self._generation += 1

        try:
            remote = await self.api.fetch_phrases(key)
        except SyncRequestError as e:
            logger.error(f"Error loading phrases for new sync key: {e}")
            return self.phrases

        self._adopt(remote, source="remote")
        self._write_local()
        return self.phrases

    # Sync plumbing

    @property
    def has_pending_push(self) -> bool:
        return self._pending_push is not None and not self._pending_push.done()

    def wire_phrases(self) -> List[Any]:
        return list(self._entries)

    def _set_entries(self, entries: List[Any]) -> None:
        self._entries = entries
        self.phrases = parse_phrases(entries)

    def _adopt(self, entries: Optional[List[Any]], source: str) -> None:
        self._set_entries(list(entries or []))
        unreadable = len(self._entries) - len(self.phrases)
        if unreadable:
            logger.warning(f"Keeping {unreadable} unreadable {source} phrase entries as-is")

    def _commit(self, entries: List[Any]) -> None:
        self._set_entries(entries)
        self._schedule_push()
        self._write_local()

    def _write_local(self) -> None:
        self.cache.store_phrases(self.wire_phrases())

    def _schedule_push(self) -> None:
        self._cancel_pending_push()
        task = asyncio.create_task(self._push_after_delay())
        self._pending_push = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _cancel_pending_push(self) -> None:
        if self._pending_push is not None and not self._pending_push.done():
            self._pending_push.cancel()
        self._pending_push = None

    async def _push_after_delay(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # In flight from here on; later mutations schedule a new push instead
        self._pending_push = None
        await self._push_now()

    async def _push_now(self) -> None:
        if not self.sync_key:
            return
        sync_key = self.sync_key
        phrases = self.wire_phrases()
        self.is_syncing = True
        try:
            await self.api.push_phrases(sync_key, phrases)
            logger.debug(f"Pushed {len(phrases)} phrases")
        except SyncRequestError as e:
            if e.is_rate_limited:
                logger.warning(f"Sync rate limited; the next change will retry: {e}")
            else:
                logger.error(f"Error syncing phrases: {e}")
        finally:
            self.is_syncing = False

    async def flush(self) -> None:
        """Push now if a push is pending, then wait for in-flight pushes."""
        if self.has_pending_push:
            self._cancel_pending_push()
            await self._push_now()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        tasks = [t for t in self._tasks if not t.done()]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Drop any pending push and wait for in-flight ones."""
        self._cancel_pending_push()
        await self.wait_idle()
