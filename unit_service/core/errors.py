"""Error Hierarchy: typed, categorized exceptions for all Unit Service failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes; repository errors (500-level) are critical
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with UnitServiceError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - UnitNotFoundError / AmbiguousUnitLookupError share UnitLookupError: callers that only
      care about "not exactly one" catch the base
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    unit_id: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class UnitServiceError(Exception):
    """Base exception for all Unit Service errors."""

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
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "unit_id": self.context.unit_id,
                    "user_id": self.context.user_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class UnitValidationError(UnitServiceError):
    """Unit failed one or more entity invariants."""
    def __init__(
        self, violations: list[tuple[str, str]], context: ErrorContext | None = None,
    ):
        details = "; ".join(f"{name}: {msg}" for name, msg in violations)
        super().__init__(
            f"Unit validation failed: {details}",
            "UNIT_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations

    @property
    def rule_names(self) -> list[str]:
        return [name for name, _ in self.violations]


class BadParamsError(UnitServiceError):
    """Caller-supplied arguments failed a precondition."""
    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        violations: list[tuple[str, str]] | None = None,
    ):
        super().__init__(
            message, "BAD_PARAMS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations or []

    @classmethod
    def from_validation(
        cls, exc: UnitValidationError, context: ErrorContext | None = None,
    ) -> "BadParamsError":
        """Wrap an entity validation failure; caller chains with `raise ... from exc`."""
        return cls(
            f"bad params: {exc.message}", context, violations=list(exc.violations),
        )

    def to_response(self) -> dict:
        response = super().to_response()
        if self.violations:
            response["error"]["violations"] = [
                {"rule": name, "message": msg} for name, msg in self.violations
            ]
        return response


class UserIdMissingError(UnitServiceError):
    """Target unit has no owner recorded; mutation is categorically disallowed."""
    def __init__(self, unit_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unit '{unit_id}' has no owner; it cannot be updated",
            "USER_ID_MISSING", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class UserIdMismatchError(UnitServiceError):
    """Requesting user is not the recorded owner."""
    def __init__(self, unit_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unit '{unit_id}' is owned by another user",
            "USER_ID_MISMATCH", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class UnitLookupError(UnitServiceError):
    """By-id fetch did not return exactly one unit."""


class UnitNotFoundError(UnitLookupError):
    """Requested unit does not exist."""
    def __init__(self, unit_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unit '{unit_id}' not found",
            "UNIT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class AmbiguousUnitLookupError(UnitLookupError):
    """By-id fetch returned more than one unit."""
    def __init__(self, unit_id: str, count: int, context: ErrorContext | None = None):
        super().__init__(
            f"Unit '{unit_id}' lookup returned {count} records, expected 1",
            "UNIT_LOOKUP_AMBIGUOUS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.count = count


# ─── Infrastructure Errors (500-level) ──────────────────────────

class RepositoryError(UnitServiceError):
    """Persistence boundary failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            f"Repository {operation} failed: {message}",
            "REPOSITORY_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
        self.reason = message
