"""
Dependency providers for FastAPI routes.

Services are built from objects placed on ``app.state`` by ``create_app``
so tests and alternative deployments can inject their own store,
limiters and translation backend.
"""

from fastapi import Request

from app.config.settings import get_settings
from app.core.store_client import KeyValueStore, get_store
from app.services.phrase_sync_service import PhraseSyncService
from app.services.translation_service import TranslationService


def get_phrase_store(request: Request) -> KeyValueStore:
    store = getattr(request.app.state, "store", None)
    return store if store is not None else get_store()


def get_phrase_sync_service(request: Request) -> PhraseSyncService:
    return PhraseSyncService(get_phrase_store(request))


def get_translation_service(request: Request) -> TranslationService:
    service = getattr(request.app.state, "translation_service", None)
    if service is None:
        service = TranslationService(get_settings().translation)
        request.app.state.translation_service = service
    return service
