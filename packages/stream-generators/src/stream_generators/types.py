"""
Stream option types.

Options are plain pydantic models so they validate on construction and can be
copied with ``model_copy(update=...)``.
"""
from __future__ import annotations

from collections.abc import AsyncIterable
from typing import Any

from pydantic import BaseModel, Field

# Anything with an ``__aiter__`` that returns an async iterator.
Source = AsyncIterable[Any]

DEFAULT_HIGH_WATER_MARK = 16  # items, object mode


# ─── Readable ─────────────────────────────────────────────────────────────────

class ReadableOptions(BaseModel):
    """Options for a readable stream."""
    # Demand stops once this many items sit in the internal buffer
    high_water_mark: int = Field(default=DEFAULT_HIGH_WATER_MARK, ge=1)
    # Destroy (and emit "close") automatically after "end"
    auto_destroy: bool = True


class GeneratorStreamOptions(ReadableOptions):
    """Options for a stream wrapping an async iterable."""
    # Call the source's aclose() when the stream is torn down
    close_source: bool = True


# ─── Writable ─────────────────────────────────────────────────────────────────

class WritableOptions(BaseModel):
    """Options for a writable sink."""
    # write() returns False once this many items are queued
    high_water_mark: int = Field(default=DEFAULT_HIGH_WATER_MARK, ge=1)
    # Destroy (and emit "close") automatically after "finish"
    auto_destroy: bool = True
