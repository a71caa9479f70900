"""TTS tests — language fallback, chunk ordering and the streaming route.

Invariants:
    - Candidates: cached, requested, base, "en", without duplicates
    - A chunk failing every candidate is skipped; the stream continues
    - The working language is cached per requested language, for known languages only,
      and the cache never grows past its cap
"""

import pytest

from app.core.errors import ExternalServiceError, ValidationError
from app.services.tts_service import TTSService, language_candidates

from tests.services.fakes import FakeTTS


def test_language_candidates():
    assert language_candidates("hi-IN", {}) == ["hi-IN", "hi", "en"]
    assert language_candidates("en", {}) == ["en"]
    assert language_candidates("mr", {"mr": "hi"}) == ["hi", "mr", "en"]


async def test_fallback_caches_working_language():
    cache: dict[str, str] = {}
    tts = FakeTTS(failing={"sa-IN"})
    service = TTSService(tts, cache)

    audio = await service.synthesize_with_fallback("namaste", "sa-IN")
    assert audio == b"sa:namaste|"
    assert cache == {"sa-IN": "sa"}

    tts.calls.clear()
    await service.synthesize_with_fallback("again", "sa-IN")
    assert tts.calls == [("again", "sa")]



async def test_unknown_languages_are_not_cached():
    cache: dict[str, str] = {}
    service = TTSService(FakeTTS(failing={"zz-QQ", "zz"}), cache)
    for n in range(20):
        await service.synthesize_with_fallback("hi", f"zz-QQ{n}")
    await service.synthesize_with_fallback("hi", "zz-QQ")
    assert cache == {}


async def test_cache_is_capped(monkeypatch):
    monkeypatch.setattr("app.services.tts_service.MAX_CACHED_LANGUAGES", 2)
    cache: dict[str, str] = {}
    service = TTSService(FakeTTS(), cache)
    for code in ("hi-IN", "hi-XX", "hi-YY"):
        await service.synthesize_with_fallback("namaste", code)
    assert cache == {"hi-IN": "hi-IN", "hi-XX": "hi-XX"}

async def test_all_candidates_failing_raises():
    service = TTSService(FakeTTS(failing={"xx", "en"}), {})
    with pytest.raises(ExternalServiceError):
        await service.synthesize_with_fallback("hello", "xx")


async def test_stream_keeps_order():
    service = TTSService(FakeTTS(), {})
    chunks = service.prepare("One. Two. Three.")
    audio = [part async for part in service.stream(chunks, "en")]
    assert audio == [b"en:One.|", b"en:Two.|", b"en:Three.|"]


def test_prepare_rejects_blank_text():
    with pytest.raises(ValidationError) as exc:
        TTSService(FakeTTS(), {}).prepare("  ")
    assert exc.value.message == "Missing text field"


async def test_route_streams_mp3(client, tts):
    resp = await client.post("/api/text-to-speech", json={"text": "Hi there. Bye now.", "languageCode": "fr"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.content == b"fr:Hi there.|fr:Bye now.|"


async def test_route_missing_text(client):
    resp = await client.post("/api/text-to-speech", json={"languageCode": "fr"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing text field"
