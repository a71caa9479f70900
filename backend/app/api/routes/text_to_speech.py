"""Text-to-Speech Route — chunked MP3 streaming.

Invariants:
    - Blank text → 400 "Missing text field" before any audio is streamed
    - Chunks are synthesized in order; a chunk that fails every fallback is skipped
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.api.dependencies import get_tts_service
from app.schemas.translation import TextToSpeechRequest
from app.services.tts_service import TTSService

router = APIRouter(prefix="/api", tags=["tts"])


@router.post("/text-to-speech")
async def text_to_speech(
    body: TextToSpeechRequest, service: TTSService = Depends(get_tts_service),
):
    chunks = service.prepare(body.text)
    return StreamingResponse(
        service.stream(chunks, body.language_code), media_type="audio/mpeg",
    )
