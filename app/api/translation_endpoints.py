"""
Translation endpoint - English text to a Vietnamese phrase with pronunciation.
"""
import logging

from fastapi import APIRouter, Depends, Request

from app.config.settings import get_settings
from app.core.dependencies import get_translation_service
from app.core.validation import parse_json_body, validate_translation_text
from app.schemas.phrase import TranslationResult
from app.services.translation_service import TranslationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translate", tags=["translation"])


@router.post("", response_model=TranslationResult)
async def translate_text(
    request: Request,
    service: TranslationService = Depends(get_translation_service),
):
    """
    Translate English text

    Body: ``{"text": str}`` with 1-500 characters
    """
    body = parse_json_body(await request.body())

    raw_text = body.get("text") if isinstance(body, dict) else None
    text = validate_translation_text(raw_text, get_settings().sync.max_text_length)

    result = await service.translate(text)
    logger.info("Translation completed", extra={"category": result.category})
    return result
