"""
Stream error types.

Every error carries a Node-style ``code`` so callers can match on it without
importing the class.
"""
from __future__ import annotations


class StreamError(Exception):
    """Base class for errors raised by the stream machinery."""

    code = "ERR_STREAM"
    default_message = "Stream error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidArgumentError(StreamError, TypeError):
    """Raised synchronously when a constructor receives an unusable argument."""

    code = "ERR_INVALID_ARG_TYPE"
    default_message = "Invalid argument"


class PushAfterEOFError(StreamError):
    code = "ERR_STREAM_PUSH_AFTER_EOF"
    default_message = "stream.push() after EOF"


class WriteAfterEndError(StreamError):
    code = "ERR_STREAM_WRITE_AFTER_END"
    default_message = "write after end"


class PrematureCloseError(StreamError):
    """Raised to an iterating consumer when the stream closes before ending."""

    code = "ERR_STREAM_PREMATURE_CLOSE"
    default_message = "Premature close"


class SourceCancelledError(StreamError):
    """
    The source raised CancelledError without the stream cancelling it.

    The original CancelledError is the ``__cause__``.
    """

    code = "ERR_STREAM_SOURCE_CANCELLED"
    default_message = "Source was cancelled"
