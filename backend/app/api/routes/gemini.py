"""Gemini Routes — direct access to the TextProcessor operations.

Invariants:
    - Each route validates its body, then delegates to exactly one TextProcessor method
    - Results are returned under data unchanged
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_text_processor
from app.api.responses import ok
from app.schemas.translation import (
    GeminiTextRequest, GeminiTranslateRequest, SpeechTranslationRequest,
)
from app.services.text_processor import TextProcessor

router = APIRouter(prefix="/api/gemini", tags=["gemini"])


@router.post("/clean")
async def clean(body: GeminiTextRequest, processor: TextProcessor = Depends(get_text_processor)):
    return ok(await processor.clean_text(body.text, body.language))


@router.post("/translate")
async def translate(
    body: GeminiTranslateRequest, processor: TextProcessor = Depends(get_text_processor),
):
    return ok(await processor.translate_text(
        body.text, body.source_language, body.target_language,
    ))


@router.post("/sentiment")
async def sentiment(
    body: GeminiTextRequest, processor: TextProcessor = Depends(get_text_processor),
):
    return ok(await processor.analyze_sentiment(body.text, body.language))


@router.post("/extract")
async def extract(
    body: GeminiTextRequest, processor: TextProcessor = Depends(get_text_processor),
):
    return ok(await processor.extract_key_info(body.text, body.language))


@router.post("/speech-translation")
async def speech_translation(
    body: SpeechTranslationRequest, processor: TextProcessor = Depends(get_text_processor),
):
    return ok(await processor.speech_translation(
        body.text, body.user_language, body.target_language,
    ))
