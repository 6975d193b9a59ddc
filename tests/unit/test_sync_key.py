"""
Unit tests for sync key generation
"""
from app.client.sync_key import SYNC_KEY_ALPHABET, generate_sync_key
from app.core.validation import is_valid_sync_key


def test_generated_key_shape():
    key = generate_sync_key()
    assert len(key) == 8
    assert set(key) <= set(SYNC_KEY_ALPHABET)


def test_generated_keys_pass_server_validation():
    for _ in range(200):
        assert is_valid_sync_key(generate_sync_key())


def test_generated_keys_vary():
    keys = {generate_sync_key() for _ in range(100)}
    assert len(keys) > 95


def test_custom_length():
    assert len(generate_sync_key(16)) == 16
