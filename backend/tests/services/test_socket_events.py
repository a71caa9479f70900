"""Socket Event tests — registration, transcription and translation broadcasts.

Invariants:
    - register-user without userId answers translation-error to the sender only
    - Results are broadcast to the room channel, errors go to the sender's sid
    - Disconnect drops the socket from every room it had joined
"""

import pytest

from app.api.socket_events import SocketEventHandlers
from app.services.text_processor import TextProcessor
from app.services.translate_text_service import TranslateTextService


@pytest.fixture
def handlers(sockets, gemini, translator):
    return SocketEventHandlers(
        sockets,
        processor_factory=lambda: TextProcessor(gemini),
        cleaner_factory=lambda: TranslateTextService(gemini, translator),
    )


async def test_register_joins_room(handlers, sockets, fake_sio):
    await handlers.connect("sid-1", {})
    await handlers.register_user("sid-1", {"userId": "u1", "username": "Alice", "roomId": "room-1"})

    assert fake_sio.entered == [("sid-1", "room-1")]
    assert sockets.sids_for_user("room-1", "u1") == ["sid-1"]
    assert sockets.get_all_connected_users()[0]["username"] == "Alice"


async def test_register_requires_user_id(handlers, fake_sio):
    await handlers.connect("sid-1", {})
    await handlers.register_user("sid-1", {"roomId": "room-1"})
    assert fake_sio.emitted == [{
        "event": "translation-error", "data": {"message": "userId is required"},
        "to": "sid-1", "room": None,
    }]


async def test_disconnect_leaves_rooms(handlers, sockets):
    await handlers.connect("sid-1", {})
    await handlers.register_user("sid-1", {"userId": "u1", "roomId": "room-1"})
    await handlers.disconnect("sid-1")
    assert sockets.room_members("room-1") == set()
    assert sockets.get_socket("sid-1") is None


async def test_transcribe_text_broadcasts(handlers, gemini, fake_sio):
    gemini.push("Where is the station?")
    await handlers.transcribe_text("sid-1", {
        "roomId": "room-1", "text": "where is the station", "userId": "u1", "username": "Alice",
    })
    [event] = fake_sio.events("transcribed-text")
    assert event["room"] == "room-1"
    assert event["data"]["originalText"] == "where is the station"
    assert event["data"]["cleanedText"] == "Where is the station?"
    assert "timestamp" in event["data"]


async def test_speech_translation_broadcasts(handlers, gemini, fake_sio):
    gemini.push("Good night.", "Buenas noches.")
    await handlers.speech_translation("sid-1", {
        "roomId": "room-1", "text": "good night", "userId": "u1",
        "userLanguage": "en", "targetLanguage": "es",
    })
    [event] = fake_sio.events("translated-text")
    assert event["data"]["translatedText"] == "Buenas noches."
    assert event["data"]["targetLanguage"] == "Spanish"
    assert event["data"]["userId"] == "u1"


async def test_speech_translation_failure_goes_to_sender(handlers, gemini, fake_sio):
    gemini.push(gemini.failure())
    await handlers.speech_translation("sid-9", {"roomId": "room-1", "text": "hello"})
    assert fake_sio.events("translated-text") == []
    [error] = fake_sio.events("translation-error")
    assert error["to"] == "sid-9"
    assert error["data"]["message"].startswith("Gemini API error")


async def test_missing_text(handlers, fake_sio):
    await handlers.transcribe_text("sid-1", {"roomId": "room-1"})
    assert fake_sio.events("translation-error")[0]["data"] == {
        "message": "roomId and text are required",
    }


async def test_non_string_text_is_rejected_to_sender(handlers, gemini, fake_sio):
    await handlers.transcribe_text("sid-1", {"roomId": "room-1", "text": 12345})
    await handlers.speech_translation("sid-1", {"roomId": "room-1", "text": ["hi"]})

    assert gemini.calls == []
    assert fake_sio.events("transcribed-text") == []
    errors = fake_sio.events("translation-error")
    assert [e["to"] for e in errors] == ["sid-1", "sid-1"]
    assert {e["data"]["message"] for e in errors} == {"Text input must be a non-empty string"}


async def test_non_object_payload_is_rejected(handlers, fake_sio):
    await handlers.register_user("sid-1", "u1")
    await handlers.transcribe_text("sid-1", "hello")
    messages = [e["data"]["message"] for e in fake_sio.events("translation-error")]
    assert messages == ["Event payload must be an object"] * 2


async def test_unexpected_failure_still_reaches_sender(sockets, fake_sio):
    def broken_processor():
        raise RuntimeError("processor unavailable")

    handlers = SocketEventHandlers(sockets, processor_factory=broken_processor)
    await handlers.speech_translation("sid-3", {"roomId": "room-1", "text": "hello"})
    assert fake_sio.events("translation-error") == [{
        "event": "translation-error", "data": {"message": "Translation failed"},
        "to": "sid-3", "room": None,
    }]
