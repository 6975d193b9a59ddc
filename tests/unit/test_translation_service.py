import httpx
import pytest

from app.config.settings import TranslationSettings
from app.core.exceptions import ErrorCode, TranslationError
from app.services.translation_service import (
    TranslationService,
    normalize_category,
    strip_code_fences,
)


def reply(text):
    return {"content": [{"type": "text", "text": text}]}


def test_strip_code_fences():
    fenced = '```json\n{"vietnamese": "Cảm ơn"}\n```'
    assert strip_code_fences(fenced) == '{"vietnamese": "Cảm ơn"}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'


def test_normalize_category():
    assert normalize_category("Food") == "food"
    assert normalize_category("weather") == "general"
    assert normalize_category(None) == "general"
    assert normalize_category("uncategorized") == "general"


def test_parse_response_with_fences():
    service = TranslationService(TranslationSettings(api_key="k"))
    result = service.parse_response(reply(
        '```json\n{"vietnamese": "Bao nhiêu tiền?", "phonetic": "bow→ nyew→ tee-en↘", "category": "shopping"}\n```'
    ))
    assert result.vietnamese == "Bao nhiêu tiền?"
    assert result.category == "shopping"


def test_parse_response_without_content():
    service = TranslationService(TranslationSettings(api_key="k"))
    with pytest.raises(TranslationError, match="No translation received"):
        service.parse_response({"content": []})


def test_request_body_uses_configured_model():
    service = TranslationService(TranslationSettings(api_key="k", model="test-model", max_tokens=128))
    body = service.build_request_body("Thank you")
    assert body["model"] == "test-model"
    assert body["max_tokens"] == 128
    assert 'Input: "Thank you"' in body["messages"][0]["content"]


@pytest.mark.asyncio
async def test_translate_sends_auth_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["api_key"] = request.headers["x-api-key"]
        seen["version"] = request.headers["anthropic-version"]
        return httpx.Response(200, json=reply('{"vietnamese": "Xin chào", "phonetic": "sin→ chow↘", "category": "greetings"}'))

    service = TranslationService(TranslationSettings(api_key="secret"), transport=httpx.MockTransport(handler))
    result = await service.translate("Hello")

    assert result.vietnamese == "Xin chào"
    assert seen == {"api_key": "secret", "version": "2023-06-01"}


@pytest.mark.asyncio
async def test_translate_without_key():
    service = TranslationService(TranslationSettings(api_key=None))
    with pytest.raises(TranslationError) as exc_info:
        await service.translate("Hello")
    assert exc_info.value.error_code == ErrorCode.TRANSLATION_NOT_CONFIGURED
