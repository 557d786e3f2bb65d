"""Error Hierarchy — typed, categorized exceptions for document-store failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Store errors propagate untouched to the recovery boundary (api/guards.py)
    - No internal details leaked in user-facing messages (the boundary answers with
      the fixed catalogue, the message only reaches the log)

Design Decisions:
    - Single hierarchy with InventoryError base: one except clause at the boundary
      (ADR: uniform error shape)
    - Not-found and malformed-id are distinct subclasses so the boundary can map them
      to 404/400 when configured, without handlers inspecting store errors
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


class InventoryError(Exception):
    """Base exception for all host inventory errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity


# ─── Store Errors ───────────────────────────────────────────────

class StoreError(InventoryError):
    """Document store operation failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        code: str = "STORE_ERROR",
        category: ErrorCategory = ErrorCategory.DATABASE,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
    ):
        super().__init__(
            f"Store {operation} failed: {message}", code, category, severity,
        )
        self.operation = operation


class DocumentNotFoundError(StoreError):
    """No document with the given identifier exists in the collection."""
    def __init__(self, collection: str, document_id: str):
        super().__init__(
            f"{collection} '{document_id}' not found", "find",
            "DOCUMENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR,
        )
        self.collection = collection
        self.document_id = document_id


class InvalidIdError(StoreError):
    """Identifier is not a well-formed document id."""
    def __init__(self, document_id: str | None):
        super().__init__(
            f"'{document_id}' is not a valid document id", "parse_id",
            "INVALID_ID", ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
        )
        self.document_id = document_id


class StoreTimeoutError(StoreError):
    """Store call exceeded the configured timeout."""
    def __init__(self, timeout_seconds: float, operation: str):
        super().__init__(
            f"no answer within {timeout_seconds}s", operation,
            "STORE_TIMEOUT", ErrorCategory.TIMEOUT, ErrorSeverity.CRITICAL,
        )
        self.timeout_seconds = timeout_seconds
