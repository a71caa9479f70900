"""HTTP Adapter Registry — process-wide httpx-backed adapters and their FastAPI dependencies.

Invariants:
    - One adapter instance per process, built lazily from settings on first use
    - close_http_clients() closes every adapter built so far and forgets it
    - Tests replace adapters through app.dependency_overrides, never by mutating globals

Design Decisions:
    - Lazy construction (same as get_gemini): scripts and tests never open sockets
      for services they do not touch
"""

import logging

from app.config import get_settings
from app.infrastructure.clerk_client import ClerkClient
from app.infrastructure.google_translate import GoogleTranslateClient, GoogleTTSClient
from app.infrastructure.speechmatics_client import SpeechmaticsClient

logger = logging.getLogger(__name__)

_adapters: dict[str, object] = {}


def get_translate_client() -> GoogleTranslateClient:
    if "translate" not in _adapters:
        s = get_settings()
        _adapters["translate"] = GoogleTranslateClient(
            s.google_translate_url, s.http_timeout_seconds,
        )
    return _adapters["translate"]


def get_tts_client() -> GoogleTTSClient:
    if "tts" not in _adapters:
        s = get_settings()
        _adapters["tts"] = GoogleTTSClient(s.google_tts_url, s.http_timeout_seconds)
    return _adapters["tts"]


def get_speechmatics_client() -> SpeechmaticsClient:
    if "speechmatics" not in _adapters:
        s = get_settings()
        _adapters["speechmatics"] = SpeechmaticsClient(
            api_key=s.speechmatics_api_key,
            base_url=s.speechmatics_url,
            rt_key_url=s.speechmatics_rt_key_url,
            poll_interval_seconds=s.speechmatics_poll_interval_seconds,
            max_polls=s.speechmatics_max_polls,
            timeout_seconds=s.http_timeout_seconds,
        )
    return _adapters["speechmatics"]


def get_clerk_client() -> ClerkClient:
    if "clerk" not in _adapters:
        s = get_settings()
        _adapters["clerk"] = ClerkClient(
            s.clerk_secret_key, s.clerk_api_url, s.http_timeout_seconds,
        )
    return _adapters["clerk"]


async def close_http_clients() -> None:
    for name, adapter in list(_adapters.items()):
        await adapter.aclose()
        logger.info(f"Closed {name} HTTP client")
    _adapters.clear()
