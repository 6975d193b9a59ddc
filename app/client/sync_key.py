"""Sync key generation for new devices."""
import secrets
import string

from app.core.validation import is_valid_sync_key

SYNC_KEY_ALPHABET = string.digits + string.ascii_lowercase
SYNC_KEY_LENGTH = 8


def generate_sync_key(length: int = SYNC_KEY_LENGTH) -> str:
    """
    Generate a short base-36 sync key.

    No uniqueness check is made anywhere; with 36**8 keys a collision is
    unlikely but would silently share one collection between two devices.
    """
    return "".join(secrets.choice(SYNC_KEY_ALPHABET) for _ in range(length))


__all__ = ["generate_sync_key", "is_valid_sync_key", "SYNC_KEY_ALPHABET", "SYNC_KEY_LENGTH"]
