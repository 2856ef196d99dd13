"""Custom error types for the chat service."""

from typing import Optional, Dict, Any
from enum import Enum
from datetime import datetime, timezone


class ErrorCategory(Enum):
    """Categories of errors for better handling."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"
    COLLABORATOR = "collaborator"
    UNKNOWN = "unknown"


class ChatServiceError(Exception):
    """Base exception for request-level failures."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ):
        """Initialize service error."""
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}
        self.recoverable = recoverable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/response."""
        return {
            "success": False,
            "error": self.message,
            "category": self.category.value,
            "details": self.details,
            "recoverable": self.recoverable,
            "timestamp": self.timestamp.isoformat(),
        }


class ValidationError(ChatServiceError):
    """Missing or malformed request fields (client fault)."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {}
        if field:
            details["field"] = field

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            details=details,
            recoverable=False  # Validation errors require fixing input
        )


class NotFoundError(ChatServiceError):
    """A keyed resource is absent; expired and never-existing look the same."""

    status_code = 404

    def __init__(self, message: str, resource: str = "session", identifier: Optional[str] = None):
        details = {"resource": resource}
        if identifier:
            details["id"] = identifier

        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            details=details,
            recoverable=False
        )


class StoreUnavailableError(ChatServiceError):
    """Key-value store connection or operation failure."""

    status_code = 503

    def __init__(self, message: str, operation: Optional[str] = None, key: Optional[str] = None):
        details = {}
        if operation:
            details["operation"] = operation
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            category=ErrorCategory.STORAGE,
            details=details,
            recoverable=True  # Store errors might be temporary
        )


class CollaboratorError(ChatServiceError):
    """Retrieval or generation call failed or timed out."""

    def __init__(self, message: str, collaborator: str, timed_out: bool = False):
        super().__init__(
            message=message,
            category=ErrorCategory.COLLABORATOR,
            details={"collaborator": collaborator, "timed_out": timed_out},
            recoverable=True
        )
        self.collaborator = collaborator
        self.timed_out = timed_out
        self.status_code = 504 if timed_out else 502
