"""Translation API tests — /translate, /manual-translate and /gemini/*.

Invariants:
    - Results appear under data and, for translate routes, at the top level too
    - Body validation failures answer 400 with field details
    - Gemini outages surface as 503 from /gemini/*, but never from /translate
"""


async def test_translate(client, gemini, translator):
    gemini.push("How are you?")
    resp = await client.post("/api/translate", json={"text": "how are you", "targetLang": "fr"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["translatedText"] == "[fr] How are you?"
    assert body["data"]["cleanedText"] == "How are you?"


async def test_translate_survives_gemini_outage(client, gemini):
    gemini.push(gemini.failure())
    resp = await client.post("/api/translate", json={"text": "hello world", "targetLang": "de"})
    assert resp.status_code == 200
    assert resp.json()["cleanedText"] == "Hello world."


async def test_translate_requires_target(client):
    resp = await client.post("/api/translate", json={"text": "hello"})
    assert resp.status_code == 400
    fields = [d["field"] for d in resp.json()["error"]["details"]]
    assert "body.targetLang" in fields


async def test_manual_translate_skips_cleaning(client, gemini, translator):
    resp = await client.post("/api/manual-translate", json={"text": "hi there", "targetLang": "Spanish"})
    assert resp.json()["translatedText"] == "[Spanish] hi there"
    assert gemini.calls == []


async def test_gemini_speech_translation(client, gemini):
    gemini.push("Thank you.", "Merci.")
    resp = await client.post("/api/gemini/speech-translation", json={
        "text": "thank you", "userLanguage": "en", "targetLanguage": "fr",
    })
    data = resp.json()["data"]
    assert data["translatedText"] == "Merci."
    assert data["targetLanguage"] == "French"


async def test_gemini_outage_is_503(client, gemini):
    gemini.push(gemini.failure())
    resp = await client.post("/api/gemini/clean", json={"text": "hello"})
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "GEMINI_API_ERROR"


async def test_gemini_translate_validates_codes(client, gemini):
    resp = await client.post("/api/gemini/translate", json={
        "text": "hola", "sourceLanguage": "es", "targetLanguage": "english",
    })
    assert resp.status_code == 400
    assert gemini.calls == []
