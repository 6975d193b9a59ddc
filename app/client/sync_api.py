"""
HTTP client for the phrase sync and translation endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.schemas.phrase import TranslationResult

logger = logging.getLogger(__name__)


class SyncRequestError(Exception):
    """Raised when a sync request fails in transport or is answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class PhraseSyncClient:
    """
    Async client for ``/phrases`` and ``/translate``.

    One ``httpx.AsyncClient`` is reused for the client's lifetime; call
    ``aclose`` when done.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise SyncRequestError(f"{method} {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code != 200:
            error = payload.get("error") if isinstance(payload, dict) else None
            raise SyncRequestError(
                error or f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        return payload if isinstance(payload, dict) else {}

    async def fetch_phrases(self, sync_key: str) -> List[Dict[str, Any]]:
        """Fetch the collection stored under ``sync_key`` (empty if none)."""
        payload = await self._request("GET", "/phrases", params={"syncKey": sync_key})
        phrases = payload.get("phrases")
        return phrases if isinstance(phrases, list) else []

    async def push_phrases(self, sync_key: str, phrases: List[Dict[str, Any]]) -> None:
        """Overwrite the remote collection for ``sync_key``."""
        await self._request("POST", "/phrases", json={"syncKey": sync_key, "phrases": phrases})

    async def translate(self, text: str) -> TranslationResult:
        payload = await self._request("POST", "/translate", json={"text": text})
        try:
            return TranslationResult.model_validate(payload)
        except ValueError as e:
            raise SyncRequestError(f"Unexpected translation response: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
