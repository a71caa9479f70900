"""Socket Events — translation pipeline handlers on the Socket.IO server.

Invariants:
    - Every handler failure is reported only to the sender as `translation-error` {message}
    - transcribe-text: basic clean first, then Gemini clean (Gemini failure keeps the basic result)
    - speech-translation: results are broadcast to the whole room, sender included
    - disconnect always forgets the sid, even if it never registered

Design Decisions:
    - Handlers are methods of SocketEventHandlers so tests drive them without a server
    - Pipeline services are built per event from the process-wide adapters
      (same factories the HTTP dependencies use)
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

import socketio

from app.core.errors import TranslatorError
from app.core.language_codes import validate_text_input
from app.core.text_cleaning import clean_text_basic
from app.infrastructure.gemini_client import get_gemini
from app.infrastructure.http_clients import get_translate_client
from app.infrastructure.socket_manager import SocketManager
from app.services.text_processor import TextProcessor
from app.services.translate_text_service import TranslateTextService

logger = logging.getLogger(__name__)


def _default_processor() -> TextProcessor:
    return TextProcessor(get_gemini())


def _default_cleaner() -> TranslateTextService:
    return TranslateTextService(get_gemini(), get_translate_client())


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SocketEventHandlers:

    def __init__(
        self,
        manager: SocketManager,
        processor_factory: Callable[[], TextProcessor] = _default_processor,
        cleaner_factory: Callable[[], TranslateTextService] = _default_cleaner,
    ):
        self.manager = manager
        self.processor_factory = processor_factory
        self.cleaner_factory = cleaner_factory

    async def connect(self, sid: str, environ: dict, auth=None) -> None:
        self.manager.register_connection(sid)
        logger.info(f"Socket connected: {sid}")

    async def disconnect(self, sid: str, *args) -> None:
        self.manager.unregister_connection(sid)
        logger.info(f"Socket disconnected: {sid}")

    async def register_user(self, sid: str, data: dict) -> None:
        data = await self._payload(sid, data)
        if data is None:
            return
        user_id = data.get("userId")
        if not user_id:
            await self._fail(sid, "userId is required")
            return
        room_id = data.get("roomId")
        self.manager.identify(
            sid, user_id, data.get("username"), room_id, bool(data.get("isCreator")),
        )
        if room_id:
            await self.manager.join_user_to_room(sid, room_id)
        logger.info(f"Socket {sid} registered as {user_id}", extra={"room_id": room_id})

    async def transcribe_text(self, sid: str, data: dict) -> None:
        data = await self._utterance(sid, data)
        if data is None:
            return
        text = data["text"]
        try:
            basic = clean_text_basic(text)
            cleaned = await self.cleaner_factory().clean_with_gemini(
                basic, data.get("language") or "en",
            )
        except TranslatorError as e:
            await self._fail(sid, e.to_socket_event()["message"])
            return
        except Exception:
            logger.exception(f"transcribe-text failed for {sid}", extra={"sid": sid})
            await self._fail(sid, "Transcription failed")
            return
        await self.manager.broadcast_to_room(data["roomId"], "transcribed-text", {
            "userId": data.get("userId"),
            "username": data.get("username"),
            "originalText": text,
            "cleanedText": cleaned,
            "timestamp": _now(),
        })

    async def speech_translation(self, sid: str, data: dict) -> None:
        data = await self._utterance(sid, data)
        if data is None:
            return
        try:
            result = await self.processor_factory().speech_translation(
                data["text"], data.get("userLanguage") or "en",
                data.get("targetLanguage") or "en",
            )
        except TranslatorError as e:
            logger.warning(f"Speech translation failed for {sid}: {e.message}")
            await self._fail(sid, e.to_socket_event()["message"])
            return
        except Exception:
            logger.exception(f"speech-translation failed for {sid}", extra={"sid": sid})
            await self._fail(sid, "Translation failed")
            return
        await self.manager.broadcast_to_room(data["roomId"], "translated-text", {
            "userId": data.get("userId"),
            "username": data.get("username"),
            **result,
            "timestamp": _now(),
        })

    async def _payload(self, sid: str, data) -> dict | None:
        if data is None:
            return {}
        if not isinstance(data, dict):
            await self._fail(sid, "Event payload must be an object")
            return None
        return data

    async def _utterance(self, sid: str, data) -> dict | None:
        """Payload with a roomId and usable text, or None after telling the sender why."""
        data = await self._payload(sid, data)
        if data is None:
            return None
        if not data.get("roomId") or not data.get("text"):
            await self._fail(sid, "roomId and text are required")
            return None
        problem = validate_text_input(data["text"])
        if problem:
            await self._fail(sid, problem)
            return None
        return data

    async def _fail(self, sid: str, message: str) -> None:
        await self.manager.emit_to_sid(sid, "translation-error", {"message": message})


def register_socket_events(
    sio: socketio.AsyncServer, manager: SocketManager,
) -> SocketEventHandlers:
    handlers = SocketEventHandlers(manager)
    sio.on("connect", handlers.connect)
    sio.on("disconnect", handlers.disconnect)
    sio.on("register-user", handlers.register_user)
    sio.on("transcribe-text", handlers.transcribe_text)
    sio.on("speech-translation", handlers.speech_translation)
    return handlers
