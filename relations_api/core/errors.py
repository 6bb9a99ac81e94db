"""Error Hierarchy — typed, categorized exceptions for every relations API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() always carries the human message under the "error" key
    - No store diagnostics leaked beyond the message field

Design Decisions:
    - Single hierarchy with RelationsError base: FastAPI global handler catches all
    - MissingReferenceError is a NotFound kind but answers 400: creating against a
      missing parent is a rejected write, not a failed lookup
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    entity_id: int | None = None
    debug_info: dict[str, Any] | None = None


class RelationsError(Exception):
    """Base exception for all relations API errors."""

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
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(RelationsError):
    """Unique constraint or malformed input rejected on write."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class NotFoundError(RelationsError):
    """Lookup, update or delete target does not exist."""
    def __init__(
        self, message: str, context: ErrorContext | None = None,
        code: str = "NOT_FOUND", http_status: int = 404,
    ):
        super().__init__(
            message, code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, http_status,
        )


class LinkNotFoundError(NotFoundError):
    """Detach requested while one endpoint of the pair is missing."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Post or category not found", context, code="LINK_NOT_FOUND",
        )


class MissingReferenceError(NotFoundError):
    """Write referenced a parent row that does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, context, code="MISSING_REFERENCE", http_status=400,
        )


class ReferencedRecordError(RelationsError):
    """Delete blocked because other rows still reference the target."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "STILL_REFERENCED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(RelationsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
