"""
Writable sink.

Subclasses implement ``async _write(chunk)``. Writes are queued and applied
one at a time in order; ``write()`` reports backpressure by returning False
and the sink emits "drain" once its queue is empty again.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any

from .errors import WriteAfterEndError
from .stream import Stream
from .types import WritableOptions

logger = logging.getLogger(__name__)

_NO_CHUNK = object()


class Writable(Stream):
    """
    Object-mode writable sink.

    Events: "drain", "finish", "pipe" (source), "error" (exception), "close".
    """

    def __init__(self, options: WritableOptions | None = None) -> None:
        super().__init__()
        self._options = options or WritableOptions()
        self._buffer: deque[Any] = deque()
        self._writing = False
        self._ending = False
        self._finished = False
        self._need_drain = False
        self._task: asyncio.Task | None = None

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def high_water_mark(self) -> int:
        return self._options.high_water_mark

    @property
    def writable_length(self) -> int:
        return len(self._buffer) + (1 if self._writing else 0)

    @property
    def writable_need_drain(self) -> bool:
        return self._need_drain

    @property
    def writable_ended(self) -> bool:
        return self._ending

    @property
    def writable_finished(self) -> bool:
        return self._finished

    @property
    def completed(self) -> bool:
        return self._finished

    # ── Hooks ─────────────────────────────────────────────────────────────────

    async def _write(self, chunk: Any) -> None:
        raise NotImplementedError(f"{type(self).__name__}._write() is not implemented")

    async def _final(self) -> None:
        """Called once after the last write, before "finish"."""

    # ── Public API ────────────────────────────────────────────────────────────

    def write(self, chunk: Any) -> bool:
        """
        Queue ``chunk`` for writing.

        Returns False when the queue has reached the high-water mark; callers
        should wait for "drain" before writing more.
        """
        if self._ending:
            self.destroy(WriteAfterEndError())
            return False
        if self._destroyed:
            logger.debug("write() on destroyed %s ignored", type(self).__name__)
            return False

        self._buffer.append(chunk)
        self._ensure_writing()
        ok = self.writable_length < self.high_water_mark
        if not ok:
            self._need_drain = True
        return ok

    def end(self, chunk: Any = _NO_CHUNK) -> "Writable":
        """Optionally write a last chunk, then finish once the queue is flushed."""
        if chunk is not _NO_CHUNK:
            self.write(chunk)
        if self._ending or self._destroyed:
            return self
        self._ending = True
        self._ensure_writing()
        return self

    # ── Internals ─────────────────────────────────────────────────────────────

    def _ensure_writing(self) -> None:
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())

    async def _run(self) -> None:
        try:
            while self._buffer and not self._destroyed:
                chunk = self._buffer.popleft()
                self._writing = True
                try:
                    await self._write(chunk)
                finally:
                    self._writing = False
                if self._need_drain and not self._buffer and not self._destroyed:
                    self._need_drain = False
                    self.emit("drain")

            if self._ending and not self._destroyed and not self._finished:
                await self._final()
                self._finished = True
                logger.debug("%s finished", type(self).__name__)
                self.emit("finish")
                if self._options.auto_destroy:
                    self.destroy()
        except Exception as exc:
            self.destroy(exc)
        finally:
            self._task = None

    def _teardown(self) -> None:
        self._buffer.clear()
