"""Text Processor — Gemini prompts for cleaning, translation, sentiment and extraction.

Invariants:
    - Inputs validated before any model call (ValidationError, never a wasted request)
    - JSON-shaped answers: markdown fences stripped; unparseable → {"rawResponse": text}
    - speech_translation always runs clean → translate, in that order
    - Unknown language codes are prompted as "English"

Design Decisions:
    - Service raises instead of returning {success: false}: the API layer owns the envelope
    - Prompts are module constants: reviewed as text, tested by substring
"""

import json
import logging
import re

from app.core.errors import ErrorContext, ValidationError
from app.core.language_codes import (
    language_name, validate_language_code, validate_text_input,
)
from app.infrastructure.gemini_client import ResilientGeminiClient

logger = logging.getLogger(__name__)

CLEAN_PROMPT = """Please clean and improve the following text.
Language: {language}
Requirements:
- Fix spelling and grammar errors
- Improve sentence structure and flow
- Remove unnecessary repetitions
- Maintain the original meaning and intent
- Keep the same language
- Return only the cleaned text, no explanations

Text to clean: "{text}"
"""

TRANSLATE_PROMPT = """Please translate the following text from {source} to {target}.
Requirements:
- Maintain the original meaning and context
- Use natural, fluent language
- Preserve any special formatting or structure
- Return only the translated text, no explanations

Text to translate: "{text}"
Source language: {source}
Target language: {target}
"""

SENTIMENT_PROMPT = """Please analyze the sentiment of the following text.
Language: {language}
Requirements:
- Analyze the emotional tone (positive, negative, neutral)
- Provide a confidence score (0-100)
- Identify key emotional indicators
- Return result in JSON format: {{"sentiment": "positive/negative/neutral", "confidence": 85, "indicators": ["word1", "word2"]}}

Text to analyze: "{text}"
"""

EXTRACT_PROMPT = """Please extract key information from the following text.
Language: {language}
Requirements:
- Identify main topics and themes
- Extract key entities (names, places, dates, etc.)
- Identify important facts or statements
- Return result in JSON format: {{"topics": ["topic1", "topic2"], "entities": ["entity1", "entity2"], "facts": ["fact1", "fact2"]}}

Text to analyze: "{text}"
"""

SPEECH_CLEAN_PROMPT = """Clean and correct the following transcribed text. If it's in English, fix spelling, grammar, and punctuation. If it's in another language (like Hindi, Spanish, etc.), convert it to proper text in that language. Return only the cleaned text without any additional commentary:

Text: "{text}"

Cleaned text:"""

SPEECH_TRANSLATE_PROMPT = """Translate the following text from {source} to {target}. Return only the translated text without any additional commentary or formatting:

Text: "{text}"

Translation:"""

OCR_PROMPT = (
    "Extract all readable text from this image. Preserve line breaks. "
    "Return only the extracted text. If the image contains no text, "
    'reply exactly "No text found".'
)

AVAILABLE_METHODS = [
    "cleanText", "translateText", "analyzeSentiment",
    "extractKeyInfo", "speechTranslation",
]

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_model_json(raw: str) -> dict:
    """Parse a model reply that should be JSON; falls back to {"rawResponse": raw}."""
    stripped = _FENCE.sub("", raw.strip())
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        return {"rawResponse": raw}
    return parsed if isinstance(parsed, dict) else {"rawResponse": raw}


def _require_text(text) -> None:
    error = validate_text_input(text)
    if error:
        raise ValidationError(error, field="text")


def _require_language(code, field: str, label: str) -> None:
    error = validate_language_code(code)
    if error:
        raise ValidationError(f"Invalid {label} language: {error}", field=field)


class TextProcessor:
    """Prompted text operations over a ResilientGeminiClient."""

    def __init__(self, gemini: ResilientGeminiClient):
        self.gemini = gemini

    async def clean_text(self, text: str, language: str = "en") -> dict:
        _require_text(text)
        cleaned = await self.gemini.generate_text(
            CLEAN_PROMPT.format(language=language, text=text),
            context=ErrorContext(service="clean"),
        )
        return {"originalText": text, "cleanedText": cleaned, "language": language}

    async def translate_text(self, text: str, source: str, target: str) -> dict:
        _require_text(text)
        _require_language(source, "sourceLanguage", "source")
        _require_language(target, "targetLanguage", "target")
        translated = await self.gemini.generate_text(
            TRANSLATE_PROMPT.format(source=source, target=target, text=text),
            context=ErrorContext(service="translate"),
        )
        return {
            "originalText": text,
            "translatedText": translated,
            "sourceLanguage": source,
            "targetLanguage": target,
        }

    async def analyze_sentiment(self, text: str, language: str = "en") -> dict:
        _require_text(text)
        raw = await self.gemini.generate_text(
            SENTIMENT_PROMPT.format(language=language, text=text),
            context=ErrorContext(service="sentiment"),
        )
        return {"text": text, "analysis": parse_model_json(raw), "language": language}

    async def extract_key_info(self, text: str, language: str = "en") -> dict:
        _require_text(text)
        raw = await self.gemini.generate_text(
            EXTRACT_PROMPT.format(language=language, text=text),
            context=ErrorContext(service="extract"),
        )
        return {"text": text, "extraction": parse_model_json(raw), "language": language}

    async def speech_translation(
        self, text: str, user_language: str, target_language: str,
    ) -> dict:
        _require_text(text)
        source_name = language_name(user_language)
        target_name = language_name(target_language)

        cleaned = await self.gemini.generate_text(
            SPEECH_CLEAN_PROMPT.format(text=text),
            context=ErrorContext(service="speech-clean"),
        )
        translated = await self.gemini.generate_text(
            SPEECH_TRANSLATE_PROMPT.format(
                source=source_name, target=target_name, text=cleaned,
            ),
            context=ErrorContext(service="speech-translate"),
        )
        return {
            "originalText": text,
            "cleanedText": cleaned,
            "translatedText": translated,
            "sourceLanguage": source_name,
            "targetLanguage": target_name,
        }

    async def extract_image_text(self, data: bytes, mime_type: str = "image/jpeg") -> str:
        return await self.gemini.generate_text(
            [OCR_PROMPT, self.gemini.image_part(data, mime_type)],
            context=ErrorContext(service="ocr"),
        )

    def get_stats(self) -> dict:
        return {
            "connectionStatus": self.gemini.connection_status(),
            "availableMethods": list(AVAILABLE_METHODS),
        }
