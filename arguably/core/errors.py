"""Error Hierarchy — typed, categorized exceptions for all Arguably failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are retryable
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with ArguablyError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field, replace
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
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    debate_id: str | None = None
    evidence_id: str | None = None
    actor_id: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class ArguablyError(Exception):
    """Base exception for all Arguably errors."""

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

    @property
    def retryable(self) -> bool:
        return self.http_status >= 500 or self.category == ErrorCategory.CONFLICT

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "debate_id": self.context.debate_id,
                    "evidence_id": self.context.evidence_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class TransitionRejectedError(ArguablyError):
    """A state-machine rule rejected the requested action. Nothing was written."""
    def __init__(self, code: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )

    @classmethod
    def from_rule(
        cls, rule_error: dict, context: ErrorContext | None = None,
    ) -> "TransitionRejectedError":
        """Build from the error dict returned by core/enforce_* checks."""
        return cls(rule_error["error_code"], rule_error["message"], context)


class NotParticipantError(ArguablyError):
    """Actor is not allowed to act on this resource."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_PARTICIPANT", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class PermissionDeniedError(ArguablyError):
    """Actor lacks ownership or the role this action requires."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(ArguablyError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConflictError(ArguablyError):
    """Request conflicts with existing data (e.g. duplicate username)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class ConcurrencyError(ArguablyError):
    """Concurrent modification detected (compare-and-swap lost)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(ArguablyError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class AIProviderError(ArguablyError):
    """AI collaborator call failed or returned an unusable response."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = replace(context or ErrorContext(), retry_after_ms=retry_after_ms)
        super().__init__(
            f"AI provider error ({api_error_type}): {message}",
            "AI_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 503,
        )
        self.api_error_type = api_error_type


# ─── Rule error mapping ─────────────────────────────────────────

_FORBIDDEN_RULE_CODES = frozenset({"NOT_PARTICIPANT"})


def raise_for_rule(rule_error: dict | None, context: ErrorContext | None = None) -> None:
    """Raise the typed exception for an error dict from core/enforce_*; no-op on None."""
    if rule_error is None:
        return
    if rule_error["error_code"] in _FORBIDDEN_RULE_CODES:
        raise NotParticipantError(rule_error["message"], context)
    raise TransitionRejectedError.from_rule(rule_error, context)
