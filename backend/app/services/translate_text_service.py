"""Translate Text Service — clean with Gemini (basic fallback), then translate via gtx.

Invariants:
    - Cleaning never fails the pipeline: any Gemini error falls back to clean_text_basic()
    - Translation errors propagate (ExternalServiceError → 502)
    - target_lang may be a code or an English language name (see to_translate_code)

Design Decisions:
    - Conversational cleaning prompt: input is usually raw speech transcripts
    - Shared by image, document and realtime speech services for the clean step
"""

import logging

from app.core.errors import ErrorContext, GeminiAPIError, ServiceUnavailableError
from app.core.language_codes import LANGUAGE_NAMES
from app.core.text_cleaning import clean_text_basic
from app.infrastructure.gemini_client import ResilientGeminiClient
from app.infrastructure.google_translate import GoogleTranslateClient

logger = logging.getLogger(__name__)

CONVERSATIONAL_CLEAN_PROMPT = """A user is writing {language}. Please clean and improve the following text to sound like natural human speech:

IMPORTANT RULES:
1. Fix ALL spacing issues - ensure proper spaces between words, after punctuation
2. Add proper punctuation (periods, commas, question marks, exclamation marks)
3. Capitalize the first letter of sentences and proper nouns
4. Fix grammar and make sentences complete and natural
5. Preserve the original language and any natural code-switching
6. Remove any transcription artifacts or repeated words
7. Keep the tone casual and friendly, like someone actually speaking

LANGUAGE-SPECIFIC RULES:
- For English: Add question marks for questions, proper articles (a, an, the), subject-verb agreement
- For Hindi: Use proper Hindi punctuation (। for periods, ? for questions), maintain Hindi grammar structure
- For Spanish: Use proper Spanish punctuation (¿ for questions, ¡ for exclamations), maintain Spanish grammar
- For other languages: Use appropriate punctuation and grammar rules for that specific language

Original text: "{text}"

Return only the cleaned text, with no extra explanations or quotes."""


class TranslateTextService:

    def __init__(self, gemini: ResilientGeminiClient, translator: GoogleTranslateClient):
        self.gemini = gemini
        self.translator = translator

    async def clean_with_gemini(self, text: str, language: str = "en") -> str:
        if not text or not text.strip():
            return text
        prompt = CONVERSATIONAL_CLEAN_PROMPT.format(
            language=LANGUAGE_NAMES.get(language, "the user's language"), text=text,
        )
        try:
            cleaned = await self.gemini.generate_text(
                prompt, context=ErrorContext(service="clean"),
            )
        except (GeminiAPIError, ServiceUnavailableError) as e:
            logger.warning(
                f"Gemini cleaning failed, using basic cleaning: {e.message}",
                extra={"service": "gemini", "error_code": e.code},
            )
            return clean_text_basic(text)
        return cleaned or clean_text_basic(text)

    async def translate_text(
        self, text: str, target_lang: str, source_lang: str = "en",
    ) -> dict:
        cleaned = await self.clean_with_gemini(text, source_lang)
        translated = await self.translator.translate(cleaned, target_lang)
        logger.info(
            f"Translated {len(cleaned)} chars to {target_lang}",
            extra={"service": "google_translate"},
        )
        return {"translatedText": translated, "cleanedText": cleaned}

    async def manual_translate(self, text: str, target_lang: str) -> dict:
        translated = await self.translator.translate(text, target_lang)
        return {"translatedText": translated}
