"""Error Hierarchy — typed, categorized exceptions for all translator failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope {success: false, message, error: {...}}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TranslatorError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Third-party failures split by vendor: Gemini has its own retry policy, the rest share ExternalServiceError
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    room_id: str | None = None
    user_id: str | None = None
    service: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class TranslatorError(Exception):
    """Base exception for all translator backend errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "success": False,
            "message": self.context.user_message or self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "room_id": self.context.room_id,
                    "user_id": self.context.user_id,
                    "service": self.context.service,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            },
        }

    def to_socket_event(self) -> dict:
        """Convert to the payload of a `translation-error` socket event."""
        return {
            "code": self.code,
            "message": self.context.user_message or self.message,
            "recoverable": self.severity in (
                ErrorSeverity.INFO, ErrorSeverity.WARNING,
            ),
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(TranslatorError):
    """Request or domain input validation failed."""
    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field
        self.errors = errors or [message]

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["details"] = self.errors
        return body


class RoomStateError(TranslatorError):
    """Room lifecycle transition not allowed (inactive, full, ended)."""
    def __init__(self, message: str, room_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.room_id = room_id
        super().__init__(
            message, "ROOM_STATE_INVALID", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 400,
        )


class ResourceNotFoundError(TranslatorError):
    """Requested resource does not exist."""
    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(TranslatorError):
    """Unique key already taken."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class AuthenticationError(TranslatorError):
    """Missing, invalid or expired credentials."""
    def __init__(self, message: str, code: str = "AUTHENTICATION_FAILED",
                 context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class PermissionDeniedError(TranslatorError):
    """Authenticated caller lacks the role or ownership required."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class PayloadTooLargeError(TranslatorError):
    """Request body or uploaded file exceeds the configured limit."""
    def __init__(self, limit_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"Payload exceeds maximum size of {limit_bytes // (1024 * 1024)}MB",
            "REQUEST_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit_bytes = limit_bytes


class RateLimitExceededError(TranslatorError):
    """Too many requests within the policy window."""
    def __init__(self, policy: str, retry_after_seconds: int,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_seconds * 1000
        super().__init__(
            f"Too many {policy} requests, please try again later.",
            "RATE_LIMIT_EXCEEDED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, ctx, 429,
        )
        self.policy = policy
        self.retry_after_seconds = retry_after_seconds

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["retryAfter"] = self.retry_after_seconds
        return body


class UsageLimitExceededError(TranslatorError):
    """Monthly translation quota of a free-plan user is used up."""
    def __init__(self, used: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"You have reached your monthly limit of {limit} translations. "
            "Please upgrade your plan for unlimited access.",
            "USAGE_LIMIT_EXCEEDED", ErrorCategory.RATE_LIMIT,
            ErrorSeverity.WARNING, context, 429,
        )
        self.used = used
        self.limit = limit

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"].update({
            "currentUsage": self.used,
            "limit": self.limit,
            "remaining": max(0, self.limit - self.used),
        })
        return body


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TranslatorError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class GeminiAPIError(TranslatorError):
    """Gemini API call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        ctx.service = "gemini"
        super().__init__(
            f"Gemini API error ({api_error_type}): {message}",
            "GEMINI_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.api_error_type = api_error_type


class ExternalServiceError(TranslatorError):
    """Non-Gemini third-party call failed (Speechmatics, Google Translate, TTS, Clerk)."""
    def __init__(self, service: str, message: str, status_code: int | None = None,
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.service = service
        super().__init__(
            f"{service} error: {message}",
            "EXTERNAL_SERVICE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 502,
        )
        self.service = service
        self.status_code = status_code


class ServiceUnavailableError(TranslatorError):
    """Feature disabled because its credentials are not configured."""
    def __init__(self, service: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.service = service
        super().__init__(
            f"{service} is not configured",
            "SERVICE_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.service = service
