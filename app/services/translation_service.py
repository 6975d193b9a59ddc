"""
Translation Service - English to Vietnamese phrases via the Anthropic Messages API.

The model is asked for a natural phrase, a tone-marked phonetic guide and
a category, answering in a single JSON object.
"""

import json
import logging
import re
from typing import Optional

import httpx

from app.config.settings import TranslationSettings, get_settings
from app.core.exceptions import ErrorCode, TranslationError
from app.schemas.phrase import Category, TranslationResult

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are a Vietnamese language helper. The user wants to communicate something in Vietnamese.

Given the English input below, provide:
1. The simplest, most natural Vietnamese phrase to convey this meaning (not a literal translation)
2. A phonetic pronunciation guide for English speakers using this format:
   - Write each syllable with English-friendly spelling
   - Add tone arrows after each syllable: → (level), ↗ (rising), ↘ (falling), ↷ (dipping), ↓ (drop)
   - Example: "sin→ chow↘" for "Xin chào"
3. A category for this phrase (one of: {categories})

Input: "{text}"

Respond in this exact JSON format only, no other text:
{{"vietnamese": "...", "phonetic": "...", "category": "..."}}"""

_CODE_FENCE_OPEN = re.compile(r'^```(?:json)?\n?')
_CODE_FENCE_CLOSE = re.compile(r'\n?```$')

MODEL_CATEGORIES = [c.value for c in Category if c is not Category.UNCATEGORIZED]


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code fence, if the model added one."""
    content = content.strip()
    if content.startswith('```'):
        content = _CODE_FENCE_OPEN.sub('', content)
        content = _CODE_FENCE_CLOSE.sub('', content)
    return content


def normalize_category(value: Optional[str]) -> str:
    category = (value or "").strip().lower()
    return category if category in MODEL_CATEGORIES else Category.GENERAL.value


class TranslationService:
    """Client for the language model that produces phrases."""

    def __init__(
        self,
        config: Optional[TranslationSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or get_settings().translation
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    def _get_headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.config.api_key or "",
            "anthropic-version": self.config.api_version,
        }

    def build_request_body(self, text: str) -> dict:
        prompt = PROMPT_TEMPLATE.format(categories=", ".join(MODEL_CATEGORIES), text=text)
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def translate(self, text: str) -> TranslationResult:
        """
        Translate English text into a Vietnamese phrase with pronunciation.

        Args:
            text: Validated, trimmed English input

        Returns:
            TranslationResult with vietnamese, phonetic and category

        Raises:
            TranslationError: If the service is not configured, unreachable
                or returns something unusable
        """
        if not self.is_configured:
            raise TranslationError("API key not configured", ErrorCode.TRANSLATION_NOT_CONFIGURED)

        try:
            async with httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.config.api_url, json=self.build_request_body(text))
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout calling translation API: {e}")
            raise TranslationError("Translation failed") from e
        except httpx.HTTPError as e:
            logger.error(f"Error calling translation API: {e}")
            raise TranslationError("Translation failed") from e

        if response.status_code != 200:
            logger.error(
                f"Translation API returned {response.status_code}",
                extra={"response_body": response.text[:500]},
            )
            raise TranslationError("Translation service error")

        return self.parse_response(response.json())

    def parse_response(self, data: dict) -> TranslationResult:
        """Extract the phrase JSON from a Messages API response body."""
        content_blocks = data.get("content") or []
        content = content_blocks[0].get("text") if content_blocks else None
        if not content:
            raise TranslationError("No translation received")

        try:
            parsed = json.loads(strip_code_fences(content))
        except ValueError as e:
            logger.error(f"Translation output was not valid JSON: {content[:200]}")
            raise TranslationError("Translation failed") from e

        if not isinstance(parsed, dict) or not parsed.get("vietnamese"):
            raise TranslationError("Translation failed")

        return TranslationResult(
            vietnamese=str(parsed["vietnamese"]),
            phonetic=str(parsed.get("phonetic") or ""),
            category=normalize_category(parsed.get("category")),
        )
