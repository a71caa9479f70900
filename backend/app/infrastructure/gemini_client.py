"""Resilient Gemini Client — wraps google-genai with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429 / RESOURCE_EXHAUSTED): exponential backoff with jitter, respects Retry-After
    - Transient errors (5xx, connection): max N retries with exponential backoff
    - Client errors (4xx except 429): immediate failure, no retry
    - All SDK failures mapped to GeminiAPIError (core/errors.py)
    - Missing API key → ServiceUnavailableError on use, never at import/startup

Design Decisions:
    - Wrapper over raw client: isolates retry logic from text processing (ADR: single responsibility)
    - ±25% jitter on backoff: prevents thundering herd on shared quota
    - Async surface only (client.aio): every caller lives on the event loop
"""

import asyncio
import random
import logging
import time

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.core.errors import (
    GeminiAPIError, ServiceUnavailableError, ErrorContext,
)

logger = logging.getLogger(__name__)

_RATE_LIMIT_STATUS = 429


class ResilientGeminiClient:
    """Wraps the google-genai async client with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        timeout_seconds: int = 60,
    ):
        self.api_key = api_key
        self.model = model
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.client: genai.Client | None = None
        if api_key:
            self.client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
            )

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def connection_status(self) -> dict:
        """Connection summary for status endpoints (API key masked)."""
        return {
            "isConnected": self.is_configured,
            "hasModel": bool(self.is_configured and self.model),
            "model": self.model,
            "apiKey": f"***{self.api_key[-4:]}" if self.api_key else None,
        }

    async def generate_text(
        self,
        contents: str | list,
        *,
        context: ErrorContext | None = None,
    ) -> str:
        """Generate content and return the stripped response text.

        `contents` is a prompt string or a list mixing strings and
        types.Part (e.g. inline image bytes for OCR).
        """
        if self.client is None:
            raise ServiceUnavailableError("Gemini", context=context)

        for attempt in range(self.max_retries + 1):
            started = time.monotonic()
            try:
                response = await self.client.aio.models.generate_content(
                    model=self.model, contents=contents,
                )
                self._log_success(attempt, started)
                return (response.text or "").strip()

            except genai_errors.ClientError as e:
                if e.code == _RATE_LIMIT_STATUS:
                    await self._handle_rate_limit(e, attempt, context)
                    continue
                raise GeminiAPIError(
                    str(e), "client_error", context=context,
                )

            except genai_errors.ServerError as e:
                await self._handle_transient_error(e, attempt, context)

            except httpx.TimeoutException:
                raise GeminiAPIError(
                    "API timeout", "timeout", context=context,
                )

            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)

            except genai_errors.APIError as e:
                raise GeminiAPIError(
                    str(e), "api_error", context=context,
                )

        # Unreachable: the final attempt always raises from a handler
        raise GeminiAPIError("Retries exhausted", "unknown", context=context)

    @staticmethod
    def image_part(data: bytes, mime_type: str = "image/jpeg") -> types.Part:
        return types.Part.from_bytes(data=data, mime_type=mime_type)

    async def test_connection(self) -> dict:
        """One-word round trip used by status/debug endpoints."""
        try:
            reply = await self.generate_text("Reply with the single word: OK")
            return {"success": True, "response": reply}
        except (GeminiAPIError, ServiceUnavailableError) as e:
            return {"success": False, "error": e.message}

    def _log_success(self, attempt: int, started: float) -> None:
        logger.info(
            "Gemini API success",
            extra={
                "attempt": attempt + 1,
                "model": self.model,
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )

    async def _handle_rate_limit(
        self, e: genai_errors.APIError, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Handle rate limit error with retry or raise."""
        retry_after_ms = self._extract_retry_after(e)
        if attempt >= self.max_retries:
            raise GeminiAPIError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Gemini rate limit hit, retry after {delay}ms (attempt {attempt + 1})",
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: Exception, attempt: int, context: ErrorContext | None,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise GeminiAPIError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(f"Gemini transient error, retry after {delay}ms: {e}")
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, error: genai_errors.APIError) -> int | None:
        """Extract Retry-After header (returns milliseconds)."""
        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None)
        if not headers:
            return None
        val = headers.get("retry-after")
        if val and str(val).isdigit():
            return int(val) * 1000
        return None


# Singleton (initialized on startup)
gemini_client: ResilientGeminiClient | None = None


def init_gemini(settings) -> ResilientGeminiClient:
    global gemini_client
    gemini_client = ResilientGeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        max_retries=settings.gemini_max_retries,
        base_delay_ms=settings.gemini_base_delay_ms,
        max_delay_ms=settings.gemini_max_delay_ms,
        timeout_seconds=settings.gemini_timeout_seconds,
    )
    if not gemini_client.is_configured:
        logger.warning("GEMINI_API_KEY not set — Gemini features disabled")
    return gemini_client


def get_gemini() -> ResilientGeminiClient:
    """FastAPI dependency — lazily builds the client outside lifespan (tests, scripts)."""
    if gemini_client is None:
        from app.config import get_settings
        return init_gemini(get_settings())
    return gemini_client
