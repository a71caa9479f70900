"""Speech Service — batch transcription and in-process realtime transcription sessions.

Invariants:
    - Batch: one Speechmatics job per upload; the transcript is returned as plain text
    - Realtime sessions are keyed by uuid4 hex and live only in this process
    - An unknown session id → ValidationError("Invalid session") (400), never 404
    - stop_session() always removes the session, even when cleaning falls back
    - Audio chunks are transcribed in arrival order; a transcript never loses a chunk

Design Decisions:
    - Realtime chunks go through the batch API with a temporary rt key recorded
      per session: HTTP clients post base64 chunks, so no websocket is held open
      server-side (ADR: single-instance deployment)
    - Final transcript cleaned once at stop, not per chunk: one Gemini call per session
"""

import base64
import binascii
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.core.errors import ValidationError
from app.core.language_codes import to_speechmatics_code
from app.infrastructure.speechmatics_client import SpeechmaticsClient
from app.services.translate_text_service import TranslateTextService

logger = logging.getLogger(__name__)


@dataclass
class RealtimeSession:
    session_id: str
    jwt: str
    language: str
    transcript: list[str] = field(default_factory=list)
    partial: str = ""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def full_text(self) -> str:
        return " ".join(part for part in [*self.transcript, self.partial] if part).strip()


class RealtimeSessionStore:
    """In-memory session registry (one per process)."""

    def __init__(self):
        self._sessions: dict[str, RealtimeSession] = {}

    def add(self, session: RealtimeSession) -> None:
        self._sessions[session.session_id] = session

    def get(self, session_id: str | None) -> RealtimeSession:
        session = self._sessions.get(session_id or "")
        if session is None:
            raise ValidationError("Invalid session", field="sessionId")
        return session

    def remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def ids(self) -> list[str]:
        return list(self._sessions)


realtime_sessions = RealtimeSessionStore()


def get_realtime_sessions() -> RealtimeSessionStore:
    return realtime_sessions


class SpeechService:

    def __init__(
        self,
        speechmatics: SpeechmaticsClient,
        cleaner: TranslateTextService,
        sessions: RealtimeSessionStore,
    ):
        self.speechmatics = speechmatics
        self.cleaner = cleaner
        self.sessions = sessions

    async def transcribe_file(
        self, audio: bytes, filename: str = "recording.wav", language_code: str = "en",
    ) -> str:
        if not audio:
            raise ValidationError("No audio file uploaded", field="audio")
        transcript = await self.speechmatics.transcribe(audio, filename, language_code)
        logger.info(
            f"Transcribed {len(audio)} bytes ({language_code})",
            extra={"service": "speechmatics"},
        )
        return transcript

    # ─── realtime ───────────────────────────────────────────────

    async def start_session(self, language_code: str = "en") -> str:
        jwt = await self.speechmatics.create_realtime_key(ttl_seconds=3600)
        session = RealtimeSession(
            session_id=uuid.uuid4().hex,
            jwt=jwt,
            language=to_speechmatics_code(language_code),
        )
        self.sessions.add(session)
        logger.info(
            f"Realtime session {session.session_id} started",
            extra={"service": "speechmatics"},
        )
        return session.session_id

    async def push_audio(self, session_id: str, audio_base64: str) -> dict:
        session = self.sessions.get(session_id)
        try:
            audio = base64.b64decode(audio_base64, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Invalid audio data", field="audioData")

        text = await self.speechmatics.transcribe(audio, "chunk.wav", session.language)
        if text:
            session.transcript.append(text)
        return {
            "transcript": " ".join(session.transcript),
            "partialTranscript": session.partial,
        }

    async def stop_session(self, session_id: str) -> dict:
        session = self.sessions.get(session_id)
        try:
            raw = session.full_text()
            transcript = await self.cleaner.clean_with_gemini(raw, session.language) if raw else ""
        finally:
            self.sessions.remove(session_id)
        logger.info(
            f"Realtime session {session_id} stopped",
            extra={"service": "speechmatics"},
        )
        return {"transcript": transcript, "message": "Real-time transcription stopped"}

    def debug(self) -> dict:
        ids = self.sessions.ids()
        return {"activeSessions": ids, "sessionCount": len(ids)}

    async def test_key(self) -> dict:
        jwt = await self.speechmatics.create_realtime_key(ttl_seconds=60)
        return {"message": "API key is working", "hasJWT": bool(jwt)}
