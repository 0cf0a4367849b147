"""
Normalize every failure source into one externally-visible error.

Operations return ``value | Failure``. Callers that prefer exceptions use
unwrap(); the CLI and other outer layers use to_error() to get a
DesignServiceError with a fixed prefix and the original message.
"""

from typing import TypeVar

from landscaper.logging_config import get_logger
from landscaper.utils.exceptions import DesignServiceError, ErrorKind, Failure

logger = get_logger(__name__)

ERROR_PREFIX = "Gemini API error: "
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while communicating with the Gemini API."

T = TypeVar("T")


def failure_from_exception(exc: BaseException) -> Failure:
    """Wrap a transport fault or unexpected exception, preserving its message."""
    message = str(exc) or UNKNOWN_ERROR_MESSAGE
    logger.error("Error calling Gemini API: %s: %s", type(exc).__name__, message)
    return Failure(kind=ErrorKind.UPSTREAM_UNKNOWN, message=message)


def to_error(failure: Failure) -> DesignServiceError:
    """Build the externally-visible error for a failure."""
    return DesignServiceError(ERROR_PREFIX + failure.message, kind=failure.kind)


def unwrap(outcome: T | Failure) -> T:
    """
    Return the successful value, or raise the translated error.

    Raises:
        DesignServiceError: If outcome is a Failure
    """
    if isinstance(outcome, Failure):
        raise to_error(outcome)
    return outcome
