"""HTTP Middleware — rate limiting, request size guard, security headers.

Invariants:
    - Each request is counted against exactly one policy: the most specific match,
      else the general "api" policy for /api/*; health probes and OPTIONS are never limited
    - Sliding window: a key may make `limit` requests in any `window_seconds` span
    - Client key = first X-Forwarded-For hop, else the socket peer host
    - Content-Length above max_request_size → 413 before the body is read
    - Rejections use the same {success: false, error: {...}} envelope as route errors

Design Decisions:
    - In-process deques (ADR: single-instance deployment; no shared store)
    - Idle keys are swept on the request path, at most once per sweep interval
    - Limiter takes an injectable clock: window tests need no sleeping
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.error_handlers import error_json_response
from app.core.errors import PayloadTooLargeError, RateLimitExceededError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatePolicy:
    name: str
    limit: int
    window_seconds: int
    prefixes: tuple[str, ...]
    methods: frozenset[str] | None = None

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method not in self.methods:
            return False
        return any(path.startswith(p) for p in self.prefixes)


SKIP_PREFIXES = ("/api/health", "/api/v1/health")


def default_policies(api_limit: int = 100, api_window_seconds: int = 15 * 60) -> list[RatePolicy]:
    """Most specific first; the general api policy is last."""
    return [
        RatePolicy(
            "auth", 5, 15 * 60,
            ("/api/firebase-auth/profile", "/api/firebase-auth/account"),
            frozenset({"PUT", "DELETE"}),
        ),
        RatePolicy(
            "upload", 10, 60 * 60,
            ("/api/image-translate", "/api/document-translate"),
        ),
        RatePolicy(
            "translation", 30, 60,
            (
                "/api/translate", "/api/manual-translate", "/api/speech-to-text",
                "/api/realtime-speech-to-text", "/api/text-to-speech", "/api/gemini/",
            ),
        ),
        RatePolicy("api", api_limit, api_window_seconds, ("/api",)),
    ]


class SlidingWindowLimiter:
    """Per-(key, policy) timestamp deques; idle keys are swept every `sweep_seconds`."""

    def __init__(
        self,
        policies: list[RatePolicy],
        clock: Callable[[], float] = time.monotonic,
        sweep_seconds: float = 60.0,
    ):
        self.policies = policies
        self.clock = clock
        self.sweep_seconds = sweep_seconds
        self._hits: dict[tuple[str, str], deque[float]] = {}
        self._windows: dict[str, int] = {p.name: p.window_seconds for p in policies}
        self._next_sweep = clock() + sweep_seconds
        self._lock = threading.Lock()

    def policy_for(self, method: str, path: str) -> RatePolicy | None:
        if method == "OPTIONS" or path.startswith(SKIP_PREFIXES):
            return None
        return next((p for p in self.policies if p.matches(method, path)), None)

    def hit(self, key: str, policy: RatePolicy) -> int | None:
        """Record a request; returns retry-after seconds when it must be rejected."""
        now = self.clock()
        cutoff = now - policy.window_seconds
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            self._windows.setdefault(policy.name, policy.window_seconds)
            hits = self._hits.setdefault((key, policy.name), deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= policy.limit:
                return max(1, int(hits[0] + policy.window_seconds - now) + 1)
            hits.append(now)
            return None

    def _sweep(self, now: float) -> None:
        stale = [
            slot for slot, hits in self._hits.items()
            if not hits or hits[-1] <= now - self._windows[slot[1]]
        ]
        for slot in stale:
            del self._hits[slot]
        self._next_sweep = now + self.sweep_seconds
        if stale:
            logger.debug(f"Rate limiter swept {len(stale)} idle keys")

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, limiter: SlidingWindowLimiter, enabled: bool = True):
        super().__init__(app)
        self.limiter = limiter
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next):
        if self.enabled:
            policy = self.limiter.policy_for(request.method, request.url.path)
            if policy is not None:
                key = client_key(request)
                retry_after = self.limiter.hit(key, policy)
                if retry_after is not None:
                    logger.warning(
                        f"Rate limit '{policy.name}' exceeded for {key}",
                        extra={"path": request.url.path},
                    )
                    return error_json_response(RateLimitExceededError(policy.name, retry_after))
        return await call_next(request)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > self.max_bytes:
            logger.warning(
                f"Request body too large: {length} bytes",
                extra={"path": request.url.path},
            )
            return error_json_response(PayloadTooLargeError(self.max_bytes))
        return await call_next(request)


SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; "
        "img-src 'self' data: https:; script-src 'self'"
    ),
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-Frame-Options": "SAMEORIGIN",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
