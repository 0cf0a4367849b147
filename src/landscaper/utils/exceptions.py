"""
Custom exceptions and failure types for landscaper.

This module defines the exceptions raised inside the library and the closed
set of failure kinds that public operations return instead of raising.
"""

from dataclasses import dataclass
from enum import Enum


class LandscaperError(Exception):
    """Base exception for all landscaper errors."""

    pass


class ValidationError(LandscaperError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = "") -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Name of the field that failed validation (optional)
        """
        self.field = field
        super().__init__(message)


class APIError(LandscaperError):
    """Raised when an API call fails."""

    def __init__(self, message: str, status_code: int = 0, response: str = "") -> None:
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response: Raw API response (if available)
        """
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class NetworkError(LandscaperError):
    """Raised when a network operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize network error.

        Args:
            message: Error message
            original_error: The underlying exception that caused this error
        """
        self.original_error = original_error
        super().__init__(message)


class RequestTimeoutError(LandscaperError):
    """Raised when a request to the model service times out."""

    pass


class ConfigurationError(LandscaperError):
    """Raised when there is a configuration problem."""

    pass


class ImageProcessingError(LandscaperError):
    """Raised when an image cannot be loaded or decoded."""

    def __init__(self, message: str, image_path: str = "") -> None:
        """
        Initialize image processing error.

        Args:
            message: Error message
            image_path: Path to the image that caused the error
        """
        self.image_path = image_path
        super().__init__(message)


class ErrorKind(str, Enum):
    """Closed set of hard failure kinds an operation can return."""

    CONTENT_BLOCKED = "content_blocked"
    NO_CANDIDATES = "no_candidates"
    NO_IMAGE_RETURNED = "no_image_returned"
    NO_REFINED_IMAGE_RETURNED = "no_refined_image_returned"
    UPSTREAM_UNKNOWN = "upstream_unknown"


@dataclass(frozen=True)
class Failure:
    """A typed, non-raised failure returned from a public operation.

    ``block_reason`` and ``block_reason_message`` are only set for
    ``ErrorKind.CONTENT_BLOCKED``.
    """

    kind: ErrorKind
    message: str
    block_reason: str | None = None
    block_reason_message: str | None = None


class DesignServiceError(LandscaperError):
    """The single externally-visible error built from any Failure."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UPSTREAM_UNKNOWN) -> None:
        """
        Initialize design service error.

        Args:
            message: Human-readable message (already prefixed)
            kind: The failure kind this error was translated from
        """
        self.kind = kind
        super().__init__(message)
