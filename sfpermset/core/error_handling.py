""" Retryable-vs-fatal classification for errors handed back by the host.

Classification is by substring of the error message, because the host
delivers errors that have crossed a process boundary and may have lost
their type.
"""
import enum
from typing import Any, Mapping

from sfpermset.core.exceptions import SfPermsetException

RETRYABLE_MARKERS = ("429", "502", "503", "504")
FATAL_MARKERS = ("401", "403", "is required", "not found")


class ErrorDisposition(enum.Enum):
    RETRY = "retry"
    FATAL = "fatal"


def error_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error)
    if isinstance(error, Mapping):
        return str(error.get("message") or "")
    return "" if error is None else str(error)


def classify_error(error: Any) -> ErrorDisposition:
    message = error_message(error)
    if any(marker in message for marker in RETRYABLE_MARKERS):
        return ErrorDisposition.RETRY
    if any(marker in message for marker in FATAL_MARKERS):
        return ErrorDisposition.FATAL
    # unknown errors are left to the host's retry policy
    return ErrorDisposition.RETRY


def as_exception(error: Any) -> BaseException:
    """Returns something raisable for an error that may have arrived as plain data"""
    if isinstance(error, BaseException):
        return error
    return SfPermsetException(error_message(error) or "Unknown error")
