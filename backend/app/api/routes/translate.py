"""Translate Routes — cleaned and manual text translation.

Invariants:
    - /api/translate cleans with Gemini (basic fallback) before Google Translate
    - /api/manual-translate sends the text as typed
    - Signed-in users are metered: over quota → 429 before translating, counted after success
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import UsageMeter, get_translate_text_service, metered
from app.api.responses import ok
from app.core.domain_types import UsageType
from app.schemas.translation import ManualTranslateRequest, TranslateRequest
from app.services.translate_text_service import TranslateTextService

router = APIRouter(prefix="/api", tags=["translate"])


@router.post("/translate")
async def translate(
    body: TranslateRequest,
    service: TranslateTextService = Depends(get_translate_text_service),
    meter: UsageMeter = Depends(metered(UsageType.TEXT)),
):
    result = await service.translate_text(body.text, body.target_lang, body.source_lang)
    await meter.record()
    return ok(result, **result)


@router.post("/manual-translate")
async def manual_translate(
    body: ManualTranslateRequest,
    service: TranslateTextService = Depends(get_translate_text_service),
    meter: UsageMeter = Depends(metered(UsageType.TEXT)),
):
    result = await service.manual_translate(body.text, body.target_lang)
    await meter.record()
    return ok(result, **result)
