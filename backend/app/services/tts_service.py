"""TTS Service — chunked Google translate_tts synthesis with language fallback.

Invariants:
    - Chunks are synthesized and yielded strictly in text order
    - A chunk that fails for every candidate language is skipped, never aborts the stream
    - Candidate order: cached working language, requested, base (before "-"), "en"; no duplicates
    - The first candidate that succeeds is cached for a requested code whose base
      language is known, up to MAX_CACHED_LANGUAGES entries

Design Decisions:
    - Async generator feeds StreamingResponse: the first chunk plays before the last is fetched
    - Language cache is process-wide
"""

import logging
from collections.abc import AsyncIterator

from app.core.errors import ExternalServiceError, ValidationError
from app.core.language_codes import LANGUAGE_NAMES, base_language
from app.core.text_cleaning import chunk_text
from app.infrastructure.google_translate import GoogleTTSClient

logger = logging.getLogger(__name__)

# keyed by client-sent codes: only known languages, and never more than this many
MAX_CACHED_LANGUAGES = 64

_language_cache: dict[str, str] = {}


def language_candidates(requested: str, cache: dict[str, str] | None = None) -> list[str]:
    cache = _language_cache if cache is None else cache
    ordered = [cache.get(requested), requested]
    if requested:
        ordered.append(base_language(requested))
    ordered.append("en")
    return list(dict.fromkeys(c for c in ordered if c))


class TTSService:

    def __init__(self, client: GoogleTTSClient, cache: dict[str, str] | None = None):
        self.client = client
        self.cache = _language_cache if cache is None else cache

    async def synthesize_with_fallback(self, text: str, requested: str) -> bytes:
        last_error: ExternalServiceError | None = None
        for candidate in language_candidates(requested, self.cache):
            try:
                audio = await self.client.synthesize(text, candidate)
            except ExternalServiceError as e:
                last_error = e
                continue
            self._remember(requested, candidate)
            return audio
        raise last_error or ExternalServiceError("Google TTS", "TTS failed for all candidates")

    def _remember(self, requested: str, working: str) -> None:
        if requested not in self.cache:
            if base_language(requested or "") not in LANGUAGE_NAMES:
                return
            if len(self.cache) >= MAX_CACHED_LANGUAGES:
                return
        self.cache[requested] = working

    def prepare(self, text: str) -> list[str]:
        if not text or not text.strip():
            raise ValidationError("Missing text field", field="text")
        return chunk_text(text)

    async def stream(self, chunks: list[str], language: str = "en") -> AsyncIterator[bytes]:
        for chunk in chunks:
            try:
                yield await self.synthesize_with_fallback(chunk, language)
            except ExternalServiceError as e:
                logger.warning(
                    f"Skipping TTS chunk after fallbacks: {e.message}",
                    extra={"service": "google_tts"},
                )
