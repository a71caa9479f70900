"""Speechmatics Client — batch transcription jobs and realtime temporary keys over REST.

Invariants:
    - transcribe() submits a job, polls until done, returns the joined transcript text
    - A rejected job, a non-2xx response, or exhausting max_polls → ExternalServiceError
    - Missing API key → ServiceUnavailableError on use, never at startup
    - create_realtime_key() returns a short-lived JWT (ttl seconds), never the account key

Design Decisions:
    - Plain httpx against the v2 REST API instead of a vendor SDK: the batch flow is
      three requests and already async
    - Poll interval and max polls from settings: tests set the interval to 0
"""

import asyncio
import json
import logging

import httpx

from app.core.errors import ExternalServiceError, ServiceUnavailableError
from app.core.language_codes import to_speechmatics_code

logger = logging.getLogger(__name__)

_SERVICE = "Speechmatics"


class SpeechmaticsClient:
    """Async wrapper over the Speechmatics batch v2 API."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        rt_key_url: str,
        poll_interval_seconds: float = 2.0,
        max_polls: int = 90,
        timeout_seconds: int = 30,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.rt_key_url = rt_key_url
        self.poll_interval_seconds = poll_interval_seconds
        self.max_polls = max_polls
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict:
        if not self.api_key:
            raise ServiceUnavailableError(_SERVICE)
        return {"Authorization": f"Bearer {self.api_key}"}

    async def transcribe(
        self, audio: bytes, filename: str = "recording.wav", language: str = "en",
    ) -> str:
        """Run a batch transcription job to completion."""
        job_id = await self._submit_job(audio, filename, to_speechmatics_code(language))
        await self._wait_for_job(job_id)
        transcript = await self._request(
            "GET", f"{self.base_url}/jobs/{job_id}/transcript",
            params={"format": "json-v2"},
        )
        return join_transcript(transcript)

    async def create_realtime_key(self, ttl_seconds: int = 3600) -> str:
        body = await self._request("POST", self.rt_key_url, json={"ttl": ttl_seconds})
        key = body.get("key_value")
        if not key:
            raise ExternalServiceError(_SERVICE, "No key_value in API key response")
        return key

    async def _submit_job(self, audio: bytes, filename: str, language: str) -> str:
        config = {
            "type": "transcription",
            "transcription_config": {"language": language},
        }
        body = await self._request(
            "POST", f"{self.base_url}/jobs",
            files={"data_file": (filename, audio)},
            data={"config": json.dumps(config)},
        )
        job_id = body.get("id")
        if not job_id:
            raise ExternalServiceError(_SERVICE, "Job submission returned no id")
        logger.info(
            f"Speechmatics job {job_id} submitted",
            extra={"service": "speechmatics"},
        )
        return job_id

    async def _wait_for_job(self, job_id: str) -> None:
        for _ in range(self.max_polls):
            body = await self._request("GET", f"{self.base_url}/jobs/{job_id}")
            status = (body.get("job") or {}).get("status")
            if status == "done":
                return
            if status in ("rejected", "deleted", "expired"):
                raise ExternalServiceError(_SERVICE, f"Job {job_id} {status}")
            await asyncio.sleep(self.poll_interval_seconds)
        raise ExternalServiceError(_SERVICE, f"Job {job_id} did not finish in time")

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = await self.client.request(
                method, url, headers=self._headers(), **kwargs,
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(_SERVICE, f"network error: {e}")
        if response.status_code >= 400:
            raise ExternalServiceError(
                _SERVICE, f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        return response.json()

    async def aclose(self) -> None:
        await self.client.aclose()


def join_transcript(body: dict | str) -> str:
    """json-v2 transcript → words joined by spaces (punctuation attached)."""
    if isinstance(body, str):
        return body
    words: list[str] = []
    for result in body.get("results", []):
        alternatives = result.get("alternatives") or []
        if not alternatives:
            continue
        content = alternatives[0].get("content", "")
        if result.get("type") == "punctuation" and words:
            words[-1] += content
        elif content:
            words.append(content)
    return " ".join(words)
