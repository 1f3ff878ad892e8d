"""Error Hierarchy — typed, categorized exceptions for Library API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the REST envelope used by the global error handler
    - DocumentStoreError carries the raw cause into the response body

Design Decisions:
    - Single hierarchy with LibraryError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    book_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class LibraryError(Exception):
    """Base exception for all Library API errors."""

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
                    "book_id": self.context.book_id,
                    "operation": self.context.operation,
                },
            }
        }


class InvalidBodyError(LibraryError):
    """Request body is not a strict JSON object."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Request body must be a JSON object: {reason}",
            "INVALID_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


class DocumentStoreError(LibraryError):
    """Reading, mutating or persisting the document store failed.

    The original exception is exposed in ``to_response()`` under
    ``error.detail`` so clients see what the store raised.
    """
    def __init__(
        self,
        operation: str,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        detail = str(cause) if cause is not None else "unknown error"
        super().__init__(
            f"Document store {operation} failed: {detail}",
            "DOCUMENT_STORE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation
        self.cause = cause

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["detail"] = {
            "type": type(self.cause).__name__ if self.cause is not None else None,
            "message": str(self.cause) if self.cause is not None else None,
        }
        return response
