"""Tests for the error taxonomy."""

from newsbot.core.errors import (
    ChatServiceError,
    CollaboratorError,
    ErrorCategory,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)


def test_status_codes():
    assert ValidationError("Query is required", field="query").status_code == 400
    assert NotFoundError("Session not found", identifier="abc").status_code == 404
    assert StoreUnavailableError("Redis down").status_code == 503
    assert CollaboratorError("failed", collaborator="retrieval").status_code == 502
    assert CollaboratorError("slow", collaborator="generation", timed_out=True).status_code == 504
    assert ChatServiceError("boom").status_code == 500


def test_to_dict():
    payload = NotFoundError("Session not found", identifier="abc").to_dict()

    assert payload["success"] is False
    assert payload["error"] == "Session not found"
    assert payload["category"] == "not_found"
    assert payload["details"] == {"resource": "session", "id": "abc"}
    assert payload["recoverable"] is False
    assert "timestamp" in payload


def test_categories():
    assert ValidationError("x").category == ErrorCategory.VALIDATION
    assert StoreUnavailableError("x", operation="get", key="k").details == {"operation": "get", "key": "k"}
    assert StoreUnavailableError("x").recoverable is True
    assert CollaboratorError("x", collaborator="retrieval").category == ErrorCategory.COLLABORATOR
