"""
Custom exceptions for the deckgen backend.

This module provides a consistent exception hierarchy for error handling
across the stores, providers and workflows.

Exception Hierarchy:
    DeckgenException (base, 500)
    ├── NotFoundError (404)
    │   └── ProviderNotFoundError (404)
    ├── ValidationError (400)
    │   ├── ProviderDisabledError (400)
    │   └── UnsupportedDocumentError (415)
    ├── ConfigurationError (500)
    └── UpstreamError (502)
        ├── UpstreamTimeoutError (504)
        ├── DeadlineExceededError (504)
        └── DocumentParseError (422)

Workflows annotate errors with ``add_context`` instead of converting them,
so the class a caller catches is always the class that was raised.

Usage:
    from deckgen.exceptions import NotFoundError

    raise NotFoundError("job ad with ID 3 not found")
"""
from __future__ import annotations

from typing import Any


class DeckgenException(Exception):
    """
    Base exception for all deckgen errors.

    All custom exceptions inherit from this class, enabling
    consistent error handling at the API layer.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code for API response
        details: Additional error details (optional)
        error_code: Machine-readable error code
        context: Workflow annotations added while the error propagated
    """

    default_message: str = "An error occurred"
    default_status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
        error_code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status_code
        self.details = details
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context: dict[str, Any] = {}
        super().__init__(self.message)

    def add_context(self, workflow: str, step: str, **fields: Any) -> "DeckgenException":
        """
        Record where the error surfaced and prefix the message.

        The exception keeps its class; callers re-raise the same object.

        Args:
            workflow: Workflow name (e.g. "adapt_candidates")
            step: Phase that failed (e.g. "resolve_candidate")
            **fields: Identifiers relevant to the failure

        Returns:
            The same exception instance
        """
        self.context = {"workflow": workflow, "step": step, **fields}
        self.message = f"{workflow}: {step} failed: {self.message}"
        self.args = (self.message,)
        return self

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dictionary with error details
        """
        result: dict[str, Any] = {
            "detail": self.message,
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        if self.context:
            result["context"] = self.context
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code})"


# =============================================================================
# Lookup Errors (404)
# =============================================================================

class NotFoundError(DeckgenException):
    """
    Raised when a lookup by identifier or name finds no match.

    Examples:
        - Unknown job ad, candidate or adapted resume id
        - Unknown provider name
    """

    default_message = "Resource not found"
    default_status_code = 404


class ProviderNotFoundError(NotFoundError):
    """Raised when no provider is configured under the requested name."""

    default_message = "Provider not found"


# =============================================================================
# Client Errors (4xx)
# =============================================================================

class ValidationError(DeckgenException):
    """
    Raised when caller-supplied input violates a precondition.

    Examples:
        - Empty candidate list for adaptation
        - Disabled provider requested
    """

    default_message = "Validation error"
    default_status_code = 400


class ProviderDisabledError(ValidationError):
    """Raised when the requested provider is configured but disabled."""

    default_message = "Provider is disabled"


class UnsupportedDocumentError(ValidationError):
    """Raised when an uploaded document type cannot be parsed."""

    default_message = "Unsupported document type"
    default_status_code = 415


# =============================================================================
# Configuration Errors (500)
# =============================================================================

class ConfigurationError(DeckgenException):
    """
    Raised when configuration is invalid or missing.

    Examples:
        - Enabled provider without an API key or model
        - Enabled provider with no known implementation
    """

    default_message = "Configuration error"
    default_status_code = 500


# =============================================================================
# Upstream Errors (5xx)
# =============================================================================

class UpstreamError(DeckgenException):
    """
    Raised when an external call or a document parsing step fails.

    The original exception is kept on ``cause`` unchanged.

    Examples:
        - Provider API failure
        - Provider returned JSON that does not match the schema
        - Unreadable PDF content
    """

    default_message = "Upstream service error"
    default_status_code = 502

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
        error_code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, status_code, details, error_code)
        self.cause = cause


class UpstreamTimeoutError(UpstreamError):
    """Raised when a provider call exceeds its timeout."""

    default_message = "Upstream call timed out"
    default_status_code = 504


class DeadlineExceededError(UpstreamError):
    """Raised when a request deadline expired or was cancelled before a provider call."""

    default_message = "Request deadline exceeded"
    default_status_code = 504


class DocumentParseError(UpstreamError):
    """Raised when a document cannot be turned into plain text."""

    default_message = "Failed to extract text from document"
    default_status_code = 422
