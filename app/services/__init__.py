"""
Business services for phrase persistence and translation.
"""

from .phrase_sync_service import PhraseSyncService
from .translation_service import TranslationService

__all__ = [
    "PhraseSyncService",
    "TranslationService",
]
