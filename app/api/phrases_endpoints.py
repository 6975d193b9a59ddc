"""
Phrase sync endpoints - whole-collection load and overwrite keyed by sync key.
"""
import logging

from fastapi import APIRouter, Depends, Request

from app.config.settings import get_settings
from app.core.dependencies import get_phrase_sync_service
from app.core.exceptions import ErrorCode, RequestValidationFailed, StoreError
from app.core.validation import parse_json_body, validate_phrases, validate_sync_key
from app.schemas.phrase import PhrasesResponse, SyncSuccess
from app.services.phrase_sync_service import PhraseSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/phrases", tags=["phrases"])


@router.get("", response_model=PhrasesResponse)
async def get_phrases(
    request: Request,
    service: PhraseSyncService = Depends(get_phrase_sync_service),
):
    """
    Load the phrase collection for a sync key

    - **syncKey**: 6-32 alphanumeric characters
    """
    sync_key = validate_sync_key(request.query_params.get("syncKey"))

    try:
        phrases = await service.load_phrases(sync_key)
    except StoreError as e:
        raise StoreError("Failed to load phrases", details={"sync_key": sync_key}) from e

    logger.info(f"Loaded {len(phrases)} phrases", extra={"sync_key": sync_key})
    return PhrasesResponse(phrases=phrases)


@router.post("", response_model=SyncSuccess)
async def save_phrases(
    request: Request,
    service: PhraseSyncService = Depends(get_phrase_sync_service),
):
    """
    Overwrite the phrase collection for a sync key (last write wins)

    Body: ``{"syncKey": str, "phrases": [...]}``
    """
    body = parse_json_body(await request.body())

    if not isinstance(body, dict):
        raise RequestValidationFailed("Invalid JSON body", ErrorCode.INVALID_JSON)

    sync_key = validate_sync_key(body.get("syncKey"))
    phrases = validate_phrases(body.get("phrases"), get_settings().sync.max_phrases)

    try:
        await service.save_phrases(sync_key, phrases)
    except StoreError as e:
        raise StoreError("Failed to save phrases", details={"sync_key": sync_key}) from e

    logger.info(f"Saved {len(phrases)} phrases", extra={"sync_key": sync_key})
    return SyncSuccess(success=True)
