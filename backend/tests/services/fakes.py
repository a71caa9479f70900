"""Fake Adapters — in-memory stand-ins for Gemini, Google, Speechmatics, Firebase and Socket.IO.

Invariants:
    - Every fake records its calls so tests assert on what the service sent
    - FakeGemini answers from a queue first, then from a responder callable
    - FakeSio mirrors the AsyncServer methods SocketManager uses (enter/leave_room, emit)

Design Decisions:
    - Flat fake classes (no inheritance from the real adapters): nothing real is constructed
    - SocketManager itself is real in tests; only the transport underneath is faked
"""

from app.core.errors import (
    AuthenticationError, ExternalServiceError, GeminiAPIError,
)
from app.infrastructure.firebase_auth import FirebaseIdentity

WEBHOOK_SECRET = "whsec_dGVzdC13ZWJob29rLXNlY3JldC1rZXk="


class FakeGemini:
    """Mimics ResilientGeminiClient.generate_text and its status helpers."""

    def __init__(self, responder=None):
        self.calls: list = []
        self.queue: list = []
        self.responder = responder or (lambda contents: "cleaned text")
        self.model = "gemini-test"
        self.is_configured = True

    def push(self, *replies) -> None:
        """Queue replies; an Exception instance is raised instead of returned."""
        self.queue.extend(replies)

    async def generate_text(self, contents, *, context=None) -> str:
        self.calls.append(contents)
        reply = self.queue.pop(0) if self.queue else self.responder(contents)
        if isinstance(reply, Exception):
            raise reply
        return reply

    @staticmethod
    def image_part(data: bytes, mime_type: str = "image/jpeg") -> dict:
        return {"mime_type": mime_type, "size": len(data)}

    def connection_status(self) -> dict:
        return {"isConnected": True, "hasModel": True, "model": self.model, "apiKey": "***test"}

    async def test_connection(self) -> dict:
        return {"success": True, "response": "OK"}

    @staticmethod
    def failure() -> GeminiAPIError:
        return GeminiAPIError("boom", "server_error")


class FakeTranslator:
    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    async def translate(self, text: str, target_lang: str, source_lang: str = "auto") -> str:
        self.calls.append((text, target_lang))
        return f"[{target_lang}] {text}"


class FakeTTS:
    """Synthesizes b"<lang>:<text>"; languages in `failing` raise like a 4xx from Google."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.calls: list[tuple[str, str]] = []

    async def synthesize(self, text: str, language: str) -> bytes:
        self.calls.append((text, language))
        if language in self.failing:
            raise ExternalServiceError("Google TTS", "HTTP 400", status_code=400)
        return f"{language}:{text}|".encode()


class FakeSpeechmatics:
    def __init__(self, transcript: str = "hello world"):
        self.transcript = transcript
        self.transcribed: list[tuple[bytes, str, str]] = []
        self.keys_requested: list[int] = []

    async def transcribe(self, audio: bytes, filename: str = "recording.wav", language: str = "en") -> str:
        self.transcribed.append((audio, filename, language))
        return self.transcript

    async def create_realtime_key(self, ttl_seconds: int = 3600) -> str:
        self.keys_requested.append(ttl_seconds)
        return "jwt-token"


class FakeVerifier:
    """Maps bearer tokens to identities; unknown tokens are rejected."""

    def __init__(self):
        self.identities: dict[str, FirebaseIdentity] = {}
        self.is_configured = True

    def add(self, token: str, uid: str, email: str, **kwargs) -> FirebaseIdentity:
        identity = FirebaseIdentity(uid=uid, email=email, **kwargs)
        self.identities[token] = identity
        return identity

    async def verify(self, id_token: str) -> FirebaseIdentity:
        identity = self.identities.get(id_token)
        if identity is None:
            raise AuthenticationError("Invalid token", "INVALID_TOKEN")
        if identity.disabled:
            raise AuthenticationError("Account disabled", "ACCOUNT_DISABLED")
        return identity


class FakeClerk:
    def __init__(self, users: dict[str, dict] | None = None):
        self.users = users or {}

    async def get_user(self, clerk_id: str) -> dict | None:
        return self.users.get(clerk_id)


class FakeSio:
    """Records Socket.IO server calls."""

    def __init__(self):
        self.emitted: list[dict] = []
        self.entered: list[tuple[str, str]] = []
        self.left: list[tuple[str, str]] = []

    async def enter_room(self, sid: str, room: str, namespace=None) -> None:
        self.entered.append((sid, room))

    async def leave_room(self, sid: str, room: str, namespace=None) -> None:
        self.left.append((sid, room))

    async def emit(self, event: str, data=None, to=None, room=None, **kwargs) -> None:
        self.emitted.append({"event": event, "data": data, "to": to, "room": room})

    def events(self, name: str) -> list[dict]:
        return [e for e in self.emitted if e["event"] == name]
