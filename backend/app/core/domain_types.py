"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RoomCode is the public room identifier (3-50 chars, [a-zA-Z0-9_-]), never the DB uuid
    - UserId is the opaque client-side user id carried by room participants
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (ADR: socket payloads are JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RoomCode = NewType("RoomCode", str)
UserId = NewType("UserId", str)
SocketId = NewType("SocketId", str)
ClerkId = NewType("ClerkId", str)
FirebaseUid = NewType("FirebaseUid", str)


# ─── Enums ───────────────────────────────────────────────────────

class RoomStatus(str, Enum):
    """Room lifecycle states — maps to DB `status` column."""
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


class SubscriptionPlan(str, Enum):
    """Only FREE is metered against monthlyLimit."""
    FREE = "free"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class UsageType(str, Enum):
    """Usage counters tracked per user — value is the usageStats key."""
    TEXT = "textTranslations"
    VOICE = "voiceTranslations"
    DOCUMENT = "documentTranslations"
    IMAGE = "imageTranslations"
    CONVERSATION = "conversationSessions"
    VOICE_CALL = "voiceCallSessions"


class VoiceGender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class RoomEvent(str, Enum):
    """Socket.IO events emitted by the room lifecycle."""
    ROOM_CREATED = "room-created"
    ROOM_JOINED = "room-joined"
    USER_JOINED = "user-joined"
    USER_LEFT = "user-left"
    CALL_ENDED = "call-ended"
    CALL_PAUSED = "call-paused"
    CALL_RESUMED = "call-resumed"
    SETTINGS_UPDATED = "room-settings-updated"


class TranslationEvent(str, Enum):
    """Socket.IO events of the realtime translation pipeline."""
    TRANSCRIBE_TEXT = "transcribe-text"
    SPEECH_TRANSLATION = "speech-translation"
    TRANSCRIBED_TEXT = "transcribed-text"
    TRANSLATED_TEXT = "translated-text"
    TRANSLATION_ERROR = "translation-error"
    REGISTER_USER = "register-user"
