"""Error Hierarchy — typed, categorized exceptions for all WorkSync failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Referential/validation errors (400-level) leave the mirror untouched
    - Gateway errors (GatewayError subclasses) are raised, never swallowed
    - to_response() produces the REST envelope used by the HTTP adapter

Design Decisions:
    - Single hierarchy with WorkSyncError base: store callers and the FastAPI
      global handler catch one type (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    DATABASE = "database"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    actor_id: str | None = None
    entity_type: str | None = None
    entity_id: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class WorkSyncError(Exception):
    """Base exception for all WorkSync errors."""

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
    def user_message(self) -> str:
        return self.context.user_message or self.message

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity_type": self.context.entity_type,
                    "entity_id": self.context.entity_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class EntityValidationError(WorkSyncError):
    """Caller-supplied fields failed validation."""
    def __init__(
        self, message: str, fields: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields or []


class ResourceNotFoundError(WorkSyncError):
    """Targeted entity is not present in the mirror."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_type = ctx.entity_type or resource_type.lower()
        ctx.entity_id = ctx.entity_id or resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class NoWorkspaceAvailableError(WorkSyncError):
    """Project creation attempted before any workspace was loaded."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No workspace available. Load workspaces before creating projects.",
            "NO_WORKSPACE_AVAILABLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class NotAuthenticatedError(WorkSyncError):
    """Operation requires a current actor identity."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No actor is signed in.",
            "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, context, 401,
        )


# ─── Gateway Errors (remote store) ──────────────────────────────

class GatewayError(WorkSyncError):
    """Remote persistence call failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        code: str = "GATEWAY_ERROR",
        category: ErrorCategory = ErrorCategory.DATABASE,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        http_status: int = 503,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(message, code, category, severity, ctx, http_status)
        self.operation = operation


class RemoteUnavailableError(GatewayError):
    """Connection, driver or operational failure."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Remote store {operation} failed: {message}", operation,
            "REMOTE_UNAVAILABLE", context=context,
        )


class ConstraintViolationError(GatewayError):
    """Remote store rejected the row (integrity constraint)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Remote store {operation} failed: {message}", operation,
            "CONSTRAINT_VIOLATION", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, 409, context,
        )


class RowNotFoundError(GatewayError):
    """Update or delete matched no remote row."""
    def __init__(self, table: str, row_id: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"{table} row '{row_id}' not found", operation,
            "ROW_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, 404, context,
        )
        self.table = table
        self.row_id = row_id


class UnknownColumnError(GatewayError):
    """A filter, ordering or row referenced a column the table does not have."""
    def __init__(self, table: str, column: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown column '{column}' on {table}", operation,
            "UNKNOWN_COLUMN", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, 500, context,
        )
        self.table = table
        self.column = column


class StaleRevisionError(GatewayError):
    """Conditional write lost against a newer revision of the row."""
    def __init__(
        self, table: str, row_id: str, guard: dict[str, Any],
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.user_message = ctx.user_message or (
            "This item was changed by another edit. Reload and try again."
        )
        super().__init__(
            f"{table} row '{row_id}' no longer matches {guard}", "update",
            "STALE_REVISION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409, ctx,
        )
        self.table = table
        self.row_id = row_id
        self.guard = guard
