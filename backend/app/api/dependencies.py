"""API Dependencies — authentication guards and per-request service factories.

Invariants:
    - get_current_user: missing bearer token → 401 "Access token required";
      inactive local user → 401; otherwise a persisted, active User
    - get_optional_user never raises for auth problems: it returns None
    - require_role(...) → 403 "Insufficient permissions" for any other role
    - metered(...) rejects a free-plan user over the monthly quota with 429 before any work;
      routes call UsageMeter.record() only after the translation succeeded
    - Services are built from FastAPI dependencies only: tests swap adapters
      through app.dependency_overrides

Design Decisions:
    - Firebase verification happens once per request; the local user is found or
      created in the same step so every route sees a synced profile
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.domain_types import UsageType
from app.core.errors import AuthenticationError, PermissionDeniedError, ServiceUnavailableError
from app.infrastructure.database import get_db
from app.infrastructure.firebase_auth import FirebaseVerifier, get_firebase_verifier
from app.infrastructure.gemini_client import ResilientGeminiClient, get_gemini
from app.infrastructure.google_translate import GoogleTranslateClient, GoogleTTSClient
from app.infrastructure.http_clients import (
    get_speechmatics_client, get_translate_client, get_tts_client,
)
from app.infrastructure.socket_manager import SocketManager, get_socket_manager
from app.infrastructure.speechmatics_client import SpeechmaticsClient
from app.models.user import User
from app.services.document_translate_service import DocumentTranslateService
from app.services.image_translate_service import ImageTranslateService
from app.services.language_service import LanguageService
from app.services.room_service import RoomService
from app.services.speech_service import (
    RealtimeSessionStore, SpeechService, get_realtime_sessions,
)
from app.services.text_processor import TextProcessor
from app.services.translate_text_service import TranslateTextService
from app.services.tts_service import TTSService
from app.services.user_service import UserService


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


# ─── auth ───────────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    verifier: FirebaseVerifier = Depends(get_firebase_verifier),
) -> User:
    token = bearer_token(request)
    if token is None:
        raise AuthenticationError("Access token required", "TOKEN_REQUIRED")
    identity = await verifier.verify(token)
    user = await UserService(db).find_or_create_firebase_user(identity)
    if not user.is_active:
        raise AuthenticationError("Account is deactivated", "ACCOUNT_INACTIVE")
    return user


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
    verifier: FirebaseVerifier = Depends(get_firebase_verifier),
) -> User | None:
    if bearer_token(request) is None:
        return None
    try:
        return await get_current_user(request, db, verifier)
    except (AuthenticationError, ServiceUnavailableError):
        return None


def require_role(*roles: str):
    async def _check(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError("Insufficient permissions")
        return user
    return _check


require_admin = require_role("admin")


# ─── services ───────────────────────────────────────────────────

def get_room_service(
    db: AsyncSession = Depends(get_db),
    sockets: SocketManager = Depends(get_socket_manager),
) -> RoomService:
    return RoomService(db, sockets)


def get_text_processor(gemini: ResilientGeminiClient = Depends(get_gemini)) -> TextProcessor:
    return TextProcessor(gemini)


def get_translate_text_service(
    gemini: ResilientGeminiClient = Depends(get_gemini),
    translator: GoogleTranslateClient = Depends(get_translate_client),
) -> TranslateTextService:
    return TranslateTextService(gemini, translator)


def get_speech_service(
    speechmatics: SpeechmaticsClient = Depends(get_speechmatics_client),
    cleaner: TranslateTextService = Depends(get_translate_text_service),
    sessions: RealtimeSessionStore = Depends(get_realtime_sessions),
) -> SpeechService:
    return SpeechService(speechmatics, cleaner, sessions)


def get_image_translate_service(
    processor: TextProcessor = Depends(get_text_processor),
    cleaner: TranslateTextService = Depends(get_translate_text_service),
    translator: GoogleTranslateClient = Depends(get_translate_client),
    settings: Settings = Depends(get_settings),
) -> ImageTranslateService:
    return ImageTranslateService(processor, cleaner, translator, settings.max_file_size)


def get_document_translate_service(
    gemini: ResilientGeminiClient = Depends(get_gemini),
    settings: Settings = Depends(get_settings),
) -> DocumentTranslateService:
    return DocumentTranslateService(
        gemini, settings.max_documents, settings.max_document_size,
    )


def get_tts_service(client: GoogleTTSClient = Depends(get_tts_client)) -> TTSService:
    return TTSService(client)


def get_language_service(db: AsyncSession = Depends(get_db)) -> LanguageService:
    return LanguageService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


# ─── usage metering ─────────────────────────────────────────────

class UsageMeter:
    """Counts one successful translation against the signed-in user, if any."""

    def __init__(self, users: UserService, user: User | None, usage_type: UsageType):
        self.users = users
        self.user = user
        self.usage_type = usage_type

    async def record(self) -> None:
        if self.user is not None:
            await self.users.increment_usage(self.user, self.usage_type)


def metered(usage_type: UsageType):
    """Anonymous calls pass through; a free-plan user over quota gets 429."""
    async def _meter(
        user: User | None = Depends(get_optional_user),
        users: UserService = Depends(get_user_service),
    ) -> UsageMeter:
        if user is not None:
            users.ensure_can_translate(user)
        return UsageMeter(users, user, usage_type)
    return _meter
