"""
Root conftest.py: shared sources and sinks for the stream tests.

Fixtures:
  make_source: factory for InstrumentedSource (records pulls and overlaps)
  make_sink: factory for CollectingWritable (records written items)
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable

import pytest

from stream_generators import Writable, WritableOptions


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

class InstrumentedSource:
    """
    Async iterator over a fixed list that records how it is driven.

    ``fail_at`` makes the pull with that zero-based index raise ``error``.
    ``gate`` (an asyncio.Event) holds every pull until it is set.
    """

    def __init__(
        self,
        items: Iterable[Any],
        *,
        fail_at: int | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.items = list(items)
        self.fail_at = fail_at
        self.error = error or RuntimeError("source failed")
        self.delay = delay
        self.gate = gate
        self.pulls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.overlaps = 0
        self.closed = False

    def __aiter__(self) -> "InstrumentedSource":
        return self

    async def __anext__(self) -> Any:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.in_flight > 1:
            self.overlaps += 1
        index = self.pulls
        self.pulls += 1
        try:
            if self.gate is not None:
                await self.gate.wait()
            await asyncio.sleep(self.delay)
            if self.fail_at is not None and index == self.fail_at:
                raise self.error
            if index >= len(self.items):
                raise StopAsyncIteration
            return self.items[index]
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def make_source() -> Callable[..., InstrumentedSource]:
    return InstrumentedSource


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------

class CollectingWritable(Writable):
    """Writable that appends every chunk to ``items``."""

    def __init__(
        self,
        options: WritableOptions | None = None,
        *,
        delay: float = 0.0,
        fail_on: Any = None,
        on_write: Callable[[Any], None] | None = None,
    ) -> None:
        super().__init__(options)
        self.items: list[Any] = []
        self.delay = delay
        self.fail_on = fail_on
        self.on_write = on_write

    async def _write(self, chunk: Any) -> None:
        if self.on_write is not None:
            self.on_write(chunk)
        await asyncio.sleep(self.delay)
        if self.fail_on is not None and chunk == self.fail_on:
            raise ValueError(f"cannot write {chunk!r}")
        self.items.append(chunk)


@pytest.fixture
def make_sink() -> Callable[..., CollectingWritable]:
    return CollectingWritable
