"""Google Translate Adapters — keyless gtx translation and translate_tts speech endpoints.

Invariants:
    - translate() returns the concatenation of every segment's translated text
    - synthesize() returns raw MP3 bytes or raises ExternalServiceError (never partial audio)
    - Non-200 responses and malformed bodies → ExternalServiceError (core/errors.py)
    - One shared httpx.AsyncClient per adapter; closed via aclose() at shutdown

Design Decisions:
    - Public web endpoints over the paid Cloud Translation API: no credentials required
      (ADR: parity with the mobile client's offline-friendly setup)
    - httpx client injectable: tests pass an httpx.MockTransport instead of patching
"""

import logging

import httpx

from app.core.errors import ExternalServiceError
from app.core.language_codes import to_translate_code

logger = logging.getLogger(__name__)

# translate_tts rejects requests without a browser-like user agent
_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


class GoogleTranslateClient:
    """Translate text through the public gtx endpoint."""

    def __init__(self, url: str, timeout_seconds: int = 30,
                 client: httpx.AsyncClient | None = None):
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def translate(self, text: str, target_lang: str, source_lang: str = "auto") -> str:
        if not text or not text.strip():
            return ""
        params = {
            "client": "gtx",
            "sl": source_lang,
            "tl": to_translate_code(target_lang),
            "dt": "t",
            "q": text,
        }
        try:
            response = await self.client.get(self.url, params=params)
        except httpx.HTTPError as e:
            raise ExternalServiceError("Google Translate", f"network error: {e}")
        if response.status_code != 200:
            raise ExternalServiceError(
                "Google Translate", f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return parse_gtx_response(response.json())
        except ValueError as e:
            raise ExternalServiceError(
                "Google Translate", f"Failed to parse translation response: {e}",
            )

    async def aclose(self) -> None:
        await self.client.aclose()


def parse_gtx_response(body) -> str:
    """gtx answers [[["translated", "source", ...], ...], ...]."""
    if isinstance(body, str):
        return body
    if isinstance(body, list) and body and isinstance(body[0], list):
        return "".join(
            seg[0] for seg in body[0]
            if isinstance(seg, list) and seg and isinstance(seg[0], str)
        )
    raise ValueError("Unexpected response structure")


class GoogleTTSClient:
    """Synthesize short text chunks (≤200 chars) via translate_tts."""

    def __init__(self, url: str, timeout_seconds: int = 30,
                 client: httpx.AsyncClient | None = None):
        self.url = url
        self.client = client or httpx.AsyncClient(
            timeout=timeout_seconds, headers={"User-Agent": _USER_AGENT},
        )

    async def synthesize(self, text: str, language: str) -> bytes:
        params = {"ie": "UTF-8", "q": text, "tl": language, "client": "tw-ob"}
        try:
            response = await self.client.get(self.url, params=params)
        except httpx.HTTPError as e:
            raise ExternalServiceError("Google TTS", f"network error: {e}")
        if response.status_code != 200:
            logger.warning(
                f"Google TTS HTTP {response.status_code} (lang: {language})",
                extra={"service": "google_tts", "status_code": response.status_code},
            )
            raise ExternalServiceError(
                "Google TTS", f"HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.content

    async def aclose(self) -> None:
        await self.client.aclose()
