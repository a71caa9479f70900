"""Speech Routes — batch transcription uploads and realtime transcription sessions.

Invariants:
    - /api/speech-to-text answers {text} for one uploaded `audio` file
    - Realtime sessions are addressed by the sessionId returned from /start;
      an unknown id → 400 "Invalid session"
    - /stop always forgets the session, even when cleaning fails
"""

import logging

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile

from app.api.dependencies import (
    UsageMeter, get_speech_service, get_translate_text_service, metered,
)
from app.api.responses import ok
from app.core.domain_types import UsageType
from app.schemas.translation import (
    RealtimeAudioRequest, RealtimeStartRequest, RealtimeStopRequest,
)
from app.services.speech_service import SpeechService
from app.services.translate_text_service import TranslateTextService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["speech"])

GEMINI_SAMPLE_TEXT = "hello how are you doing today i am fine thank you"


@router.post("/speech-to-text")
async def speech_to_text(
    audio: UploadFile | None = File(None),
    language_code: str = Form("en", alias="languageCode"),
    service: SpeechService = Depends(get_speech_service),
    meter: UsageMeter = Depends(metered(UsageType.VOICE)),
):
    data = await audio.read() if audio is not None else b""
    filename = (audio.filename if audio is not None else None) or "recording.wav"
    text = await service.transcribe_file(data, filename, language_code)
    await meter.record()
    return ok({"text": text}, text=text)


# ─── realtime ───────────────────────────────────────────────────

realtime = APIRouter(prefix="/api/realtime-speech-to-text", tags=["speech"])


@realtime.post("/start")
async def start_realtime(
    body: RealtimeStartRequest | None = None,
    service: SpeechService = Depends(get_speech_service),
):
    session_id = await service.start_session(body.language_code if body else "en")
    return ok(
        {"sessionId": session_id},
        "Real-time transcription started",
        sessionId=session_id,
    )


@realtime.post("/audio")
async def push_realtime_audio(
    body: RealtimeAudioRequest, service: SpeechService = Depends(get_speech_service),
):
    result = await service.push_audio(body.session_id, body.audio_data)
    return ok(result, **result)


@realtime.post("/stop")
async def stop_realtime(
    body: RealtimeStopRequest, service: SpeechService = Depends(get_speech_service),
):
    result = await service.stop_session(body.session_id)
    return ok(result, result["message"], transcript=result["transcript"])


@realtime.get("/debug")
async def debug_realtime(service: SpeechService = Depends(get_speech_service)):
    return ok(service.debug())


@realtime.get("/test")
async def test_realtime_key(service: SpeechService = Depends(get_speech_service)):
    result = await service.test_key()
    return ok(result, result["message"])


@realtime.post("/test-gemini")
async def test_gemini_cleaning(
    body: dict | None = Body(None),
    cleaner: TranslateTextService = Depends(get_translate_text_service),
):
    text = (body or {}).get("text") or GEMINI_SAMPLE_TEXT
    language = (body or {}).get("language") or "en"
    cleaned = await cleaner.clean_with_gemini(text, language)
    return ok({"originalText": text, "cleanedText": cleaned})
