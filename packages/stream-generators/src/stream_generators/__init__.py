"""
stream_generators: expose async generators as backpressure-aware streams.
"""

# Options
from .types import (
    DEFAULT_HIGH_WATER_MARK,
    GeneratorStreamOptions,
    ReadableOptions,
    Source,
    WritableOptions,
)

# Errors
from .errors import (
    InvalidArgumentError,
    PrematureCloseError,
    PushAfterEOFError,
    SourceCancelledError,
    StreamError,
    WriteAfterEndError,
)

# Streams
from .stream import Stream
from .readable import EOF, Readable
from .writable import Writable
from .generator_stream import GeneratorStream, is_async_iterable, streamify
from .pipeline import finished, pipeline

# Utilities
from .utils.event_emitter import EventEmitter
from .utils.lines import chunks_to_lines, number_lines, read_chunks

__all__ = [
    # Options
    "DEFAULT_HIGH_WATER_MARK", "GeneratorStreamOptions", "ReadableOptions", "Source",
    "WritableOptions",
    # Errors
    "StreamError", "InvalidArgumentError", "PushAfterEOFError", "WriteAfterEndError",
    "PrematureCloseError", "SourceCancelledError",
    # Streams
    "Stream", "Readable", "Writable", "EOF",
    "GeneratorStream", "streamify", "is_async_iterable",
    "finished", "pipeline",
    # Utils
    "EventEmitter", "chunks_to_lines", "number_lines", "read_chunks",
]
