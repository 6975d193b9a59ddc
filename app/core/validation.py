"""
Input validation for the sync and translation boundaries.

Each validator either returns the cleaned value or raises
``RequestValidationFailed`` with the message the client receives.
"""
import json
import re
from typing import Any

from app.core.exceptions import ErrorCode, RequestValidationFailed

SYNC_KEY_PATTERN = re.compile(r'^[a-zA-Z0-9]{6,32}$')
MAX_PHRASES = 10000
MAX_TEXT_LENGTH = 500


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_body(raw: bytes) -> Any:
    """
    Decode a request body as strict JSON

    Rejects NaN and Infinity; stored collections must render back as standard JSON.

    Raises:
        RequestValidationFailed: If the body is not valid JSON
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise RequestValidationFailed("Invalid JSON body", ErrorCode.INVALID_JSON) from e


def is_valid_sync_key(value: Any) -> bool:
    """Return True when ``value`` is a string matching the sync key pattern."""
    return isinstance(value, str) and SYNC_KEY_PATTERN.fullmatch(value) is not None


def validate_sync_key(value: Any) -> str:
    """
    Validate sync key presence and format

    Args:
        value: Raw sync key from the query string or JSON body

    Returns:
        The sync key, unchanged

    Raises:
        RequestValidationFailed: If the key is missing or malformed
    """
    if not value or not isinstance(value, str):
        raise RequestValidationFailed("Sync key is required", ErrorCode.MISSING_SYNC_KEY)

    if not is_valid_sync_key(value):
        raise RequestValidationFailed("Invalid sync key format", ErrorCode.INVALID_SYNC_KEY)

    return value


def validate_phrases(value: Any, max_phrases: int = MAX_PHRASES) -> list:
    """
    Validate a phrase collection payload

    Entries are stored as submitted; only the container shape and size
    are checked here.

    Raises:
        RequestValidationFailed: If phrases is not a list or exceeds the cap
    """
    if not isinstance(value, list):
        raise RequestValidationFailed("Phrases must be an array", ErrorCode.INVALID_PHRASES)

    if len(value) > max_phrases:
        raise RequestValidationFailed(
            f"Too many phrases (max {max_phrases})",
            ErrorCode.TOO_MANY_PHRASES,
            details={"count": len(value), "max_phrases": max_phrases},
        )

    return value


def validate_translation_text(value: Any, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Validate text submitted for translation

    Returns:
        The text trimmed of surrounding whitespace

    Raises:
        RequestValidationFailed: If text is missing, blank or too long
    """
    if not value or not isinstance(value, str):
        raise RequestValidationFailed("Text is required", ErrorCode.MISSING_TEXT)

    if not value.strip():
        raise RequestValidationFailed("Text cannot be empty", ErrorCode.EMPTY_TEXT)

    if len(value) > max_length:
        raise RequestValidationFailed(
            f"Text is too long (max {max_length} characters)",
            ErrorCode.TEXT_TOO_LONG,
        )

    return value.strip()
