"""Error Hierarchy — typed, categorized exceptions for every mock API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are expected and never logged as fatal
    - Storage errors (500-level) carry the underlying message and are not retried here
    - to_response() produces the single REST error envelope used by every route

Design Decisions:
    - Single hierarchy with MockApiError base: one FastAPI handler renders all of them
    - details dict instead of per-class response shapes: missing-field lists and
      route information travel in the same envelope
    - Malformed stored records have no exception class: the record store skips them
      with a warning, so one corrupt row never fails a read
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
    METHOD_MISMATCH = "method_mismatch"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Observability context attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    endpoint_id: str | None = None
    table_id: str | None = None
    debug_info: dict[str, Any] | None = None


class MockApiError(Exception):
    """Base exception for all mock API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "details": self.details,
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class RequiredFieldsMissingError(MockApiError):
    """Write rejected: one or more required fields absent or empty."""
    def __init__(self, missing: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Missing required fields: {', '.join(missing)}",
            "MISSING_REQUIRED_FIELDS", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
            details={"missing": missing},
        )
        self.missing = missing


class InvalidRequestBodyError(MockApiError):
    """Dynamic request body is not a JSON object."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid request body: {reason}",
            "INVALID_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class PayloadTooLargeError(MockApiError):
    """Dynamic request body exceeds the configured size limit."""
    def __init__(self, limit_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"Request body exceeds {limit_bytes} bytes",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
            details={"limit_bytes": limit_bytes},
        )


class ResourceNotFoundError(MockApiError):
    """Requested endpoint or table does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class RouteNotFoundError(MockApiError):
    """No declared endpoint matches the request path (and method, for writes)."""
    def __init__(self, method: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            "Endpoint not found",
            "ROUTE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
            details={"method": method, "path": path},
        )


class MethodNotAllowedError(MockApiError):
    """A declared endpoint matched the path but cannot serve this verb."""
    def __init__(self, method: str, path: str, context: ErrorContext | None = None):
        super().__init__(
            "Method not allowed",
            "METHOD_NOT_ALLOWED", ErrorCategory.METHOD_MISMATCH,
            ErrorSeverity.WARNING, context, 405,
            details={"method": method, "path": path},
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MockApiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
