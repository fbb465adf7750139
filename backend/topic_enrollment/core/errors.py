"""Error Hierarchy - typed, categorized exceptions for every enrollment failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Conflict/not-found errors are 400-level; collaborator failures are 503
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TopicEnrollmentError base: FastAPI global handler catches all
    - ErrorContext as dataclass: tenant scope travels with the error without coupling to logging
    - DuplicateTopicKeyError is a signal, not only a failure: TopicProvisioner catches it
      to re-read the topic a concurrent request created
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
    DATABASE = "database"
    EXTERNAL_SERVICE = "external_service"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Tenant scope and debug details attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    topic_key: str | None = None
    organization_id: str | None = None
    environment_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TopicEnrollmentError(Exception):
    """Base exception for all topic enrollment errors."""

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
                    "topic_key": self.context.topic_key,
                    "organization_id": self.context.organization_id,
                    "environment_id": self.context.environment_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class BatchTooLargeError(TopicEnrollmentError):
    """More subscriber ids in one request than the configured limit."""
    def __init__(self, size: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"At most {limit} subscribers per request (got {size})",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.size = size
        self.limit = limit


class ResourceNotFoundError(TopicEnrollmentError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DuplicateTopicKeyError(TopicEnrollmentError):
    """A topic with this key already exists in the (organization, environment) scope."""
    def __init__(self, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Topic key '{key}' already exists",
            "TOPIC_KEY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.key = key


# ─── Collaborator Errors (500-level) ────────────────────────────

class DatabaseError(TopicEnrollmentError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class TopicProvisioningError(TopicEnrollmentError):
    """Topic was absent and could not be created."""
    def __init__(self, key: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Topic '{key}' not found and could not be created: {reason}",
            "TOPIC_PROVISIONING_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.key = key


class DirectoryLookupError(TopicEnrollmentError):
    """Subscriber directory search failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Subscriber directory lookup failed: {message}",
            "DIRECTORY_LOOKUP_FAILED", ErrorCategory.EXTERNAL_SERVICE,
            ErrorSeverity.CRITICAL, context, 503,
        )


class LinkWriteError(TopicEnrollmentError):
    """Bulk insert of enrollment links failed.

    Raised after classification succeeded. The add-subscribers use case fills
    existing/non_existing with the classification it computed before the write,
    but callers must not assume any link was persisted.
    """
    def __init__(
        self, message: str, link_count: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Writing {link_count} enrollment link(s) failed: {message}",
            "LINK_WRITE_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.link_count = link_count
        self.existing_external_subscribers: frozenset[str] = frozenset()
        self.non_existing_external_subscribers: frozenset[str] = frozenset()
