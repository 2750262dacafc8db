"""
Common exception types and error classification for segment_relay.

Provides:
- ErrorCategory enum for classifying failures
- Typed exception hierarchy for relay errors
- HTTP status classification for downstream responses
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """
    Classification of error types.

    The relay never retries on its own, but the category is logged and
    exported so operators (or an upstream caller) can decide whether
    resubmitting a request is worthwhile.

    Categories:
        TRANSIENT: Temporary failures that may succeed later
                   (e.g., connection refused, timeouts, 5xx, 429)
        PERMANENT: Failures that won't succeed on resubmission
                   (e.g., malformed input, 4xx, configuration issues)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class RelayError(Exception):
    """
    Base exception for all relay errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether resubmitting could plausibly succeed."""
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class PermanentError(RelayError):
    """Base class for permanent errors."""

    category = ErrorCategory.PERMANENT


class MalformedRequestError(PermanentError):
    """Inbound request body could not be parsed or segmented."""

    pass


class ConfigurationError(PermanentError):
    """Invalid or missing configuration."""

    pass


class DeliveryError(RelayError):
    """
    A segment could not be delivered to the destination.

    Raised for any non-200 response and for transport failures
    (connection refused, DNS, timeout). status_code is None for the latter.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        destination: Optional[str] = None,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        context = dict(context or {})
        if status_code is not None:
            context["http_status"] = status_code
        if destination:
            context["destination"] = destination
        super().__init__(message, cause, context)
        self.status_code = status_code
        self.destination = destination

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        if self.status_code is None:
            return ErrorCategory.TRANSIENT
        return classify_http_status(self.status_code)


def classify_http_status(status_code: int) -> ErrorCategory:
    """
    Classify HTTP status code into error category.

    Args:
        status_code: HTTP response status

    Returns:
        Appropriate ErrorCategory
    """
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code in (408, 429):
        return ErrorCategory.TRANSIENT

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN
