"""Text Processor tests — prompt wiring, JSON parsing and the clean fallback.

Invariants:
    - Invalid text or language codes never reach Gemini
    - speech_translation runs clean then translate, feeding the cleaned text forward
    - clean_with_gemini falls back to basic cleaning on any Gemini failure
"""

import pytest

from app.core.errors import ValidationError
from app.services.text_processor import TextProcessor, parse_model_json
from app.services.translate_text_service import TranslateTextService


# -- parse_model_json ---------------------------------------------------------

def test_parse_fenced_json():
    assert parse_model_json('```json\n{"sentiment": "positive"}\n```') == {"sentiment": "positive"}


def test_parse_non_json_kept_raw():
    assert parse_model_json("not json") == {"rawResponse": "not json"}
    assert parse_model_json("[1, 2]") == {"rawResponse": "[1, 2]"}


# -- TextProcessor ------------------------------------------------------------

async def test_translate_rejects_bad_language_before_calling(gemini):
    processor = TextProcessor(gemini)
    with pytest.raises(ValidationError) as exc:
        await processor.translate_text("hola", "es", "SPANISH")
    assert exc.value.message == "Invalid target language: Invalid language code format"
    assert gemini.calls == []


async def test_clean_rejects_blank_text(gemini):
    with pytest.raises(ValidationError):
        await TextProcessor(gemini).clean_text("   ")
    assert gemini.calls == []


async def test_sentiment_parses_reply(gemini):
    gemini.push('{"sentiment": "positive", "confidence": 90, "indicators": ["love"]}')
    result = await TextProcessor(gemini).analyze_sentiment("I love this")
    assert result["analysis"]["confidence"] == 90
    assert result["text"] == "I love this"


async def test_speech_translation_chains_prompts(gemini):
    gemini.push("Hello, how are you?", "Hola, ¿cómo estás?")
    result = await TextProcessor(gemini).speech_translation("hello how r u", "en", "es")

    assert result == {
        "originalText": "hello how r u",
        "cleanedText": "Hello, how are you?",
        "translatedText": "Hola, ¿cómo estás?",
        "sourceLanguage": "English",
        "targetLanguage": "Spanish",
    }
    assert "hello how r u" in gemini.calls[0]
    assert 'Text: "Hello, how are you?"' in gemini.calls[1]
    assert "from English to Spanish" in gemini.calls[1]


async def test_image_ocr_sends_prompt_and_image(gemini):
    gemini.push("STOP")
    text = await TextProcessor(gemini).extract_image_text(b"\x89PNG", "image/png")
    assert text == "STOP"
    prompt, part = gemini.calls[0]
    assert "Extract all readable text" in prompt
    assert part == {"mime_type": "image/png", "size": 4}


def test_stats_lists_methods(gemini):
    stats = TextProcessor(gemini).get_stats()
    assert "speechTranslation" in stats["availableMethods"]
    assert stats["connectionStatus"]["model"] == "gemini-test"


# -- TranslateTextService -----------------------------------------------------

async def test_clean_falls_back_on_gemini_error(gemini, translator):
    gemini.push(gemini.failure())
    service = TranslateTextService(gemini, translator)
    assert await service.clean_with_gemini("the the cat sat") == "The cat sat."


async def test_translate_cleans_then_translates(gemini, translator):
    gemini.push("Good morning.")
    result = await TranslateTextService(gemini, translator).translate_text("good morning", "es")
    assert result == {"translatedText": "[es] Good morning.", "cleanedText": "Good morning."}
    assert translator.calls == [("Good morning.", "es")]
