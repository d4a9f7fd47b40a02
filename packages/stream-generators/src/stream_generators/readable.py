"""
Readable stream.

Subclasses implement ``_read()`` and hand items back with ``push()``. The
stream asks for more only while its buffer is under the high-water mark and
no read is outstanding, so a slow consumer throttles the source.

Consumers attach with a "data" listener (flowing mode), ``pipe()``, or
``async for`` (paused mode).
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Callable

from .errors import PrematureCloseError, PushAfterEOFError
from .stream import Stream
from .types import ReadableOptions

if TYPE_CHECKING:
    from .writable import Writable

logger = logging.getLogger(__name__)


class _EOF:
    """Sentinel pushed to signal end of data."""

    def __repr__(self) -> str:
        return "EOF"


EOF = _EOF()


class Readable(Stream):
    """
    Object-mode readable stream.

    Events: "data" (item), "end", "error" (exception), "close", "pause",
    "resume".
    """

    def __init__(self, options: ReadableOptions | None = None) -> None:
        super().__init__()
        self._options = options or ReadableOptions()
        self._buffer: deque[Any] = deque()
        self._reading = False
        self._ended = False
        self._end_emitted = False
        self._pending_error: Exception | None = None
        self._flowing: bool | None = None
        self._tick_scheduled = False
        self._readable = asyncio.Event()

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def high_water_mark(self) -> int:
        return self._options.high_water_mark

    @property
    def readable_length(self) -> int:
        return len(self._buffer)

    @property
    def readable_flowing(self) -> bool | None:
        return self._flowing

    @property
    def readable_ended(self) -> bool:
        return self._end_emitted

    @property
    def completed(self) -> bool:
        return self._end_emitted

    # ── Producer side ─────────────────────────────────────────────────────────

    def _read(self, size: int) -> None:
        """Demand signal. Produce up to ``size`` items via push()."""
        raise NotImplementedError(f"{type(self).__name__}._read() is not implemented")

    def push(self, chunk: Any) -> bool:
        """
        Add an item to the buffer, or ``EOF`` to end the stream.

        Returns False once the buffer has reached the high-water mark; the
        producer should then wait for the next ``_read()``.
        """
        if self._destroyed:
            return False
        if self._ended or self._pending_error is not None:
            self.destroy(PushAfterEOFError())
            return False

        self._reading = False
        if chunk is EOF:
            self._ended = True
        else:
            self._buffer.append(chunk)
        self._readable.set()
        self._schedule_tick()
        return not self._ended and len(self._buffer) < self.high_water_mark

    def fail(self, error: Exception) -> None:
        """End the stream with ``error``, delivered after the buffered items."""
        if self._destroyed:
            return
        if self._ended or self._pending_error is not None:
            self.destroy(error)
            return

        self._reading = False
        self._pending_error = error
        self._readable.set()
        self._schedule_tick()

    # ── Demand ────────────────────────────────────────────────────────────────

    def _maybe_read(self) -> None:
        if (
            self._reading
            or self._ended
            or self._pending_error is not None
            or self._destroyed
            or len(self._buffer) >= self.high_water_mark
        ):
            return
        self._reading = True
        try:
            self._read(self.high_water_mark)
        except Exception as exc:
            self.destroy(exc)

    def _schedule_tick(self) -> None:
        if self._tick_scheduled or self._destroyed:
            return
        self._tick_scheduled = True
        asyncio.get_running_loop().call_soon(self._tick)

    def _tick(self) -> None:
        self._tick_scheduled = False
        if self._destroyed:
            return

        if self._flowing:
            while self._flowing and self._buffer and not self._destroyed:
                chunk = self._buffer.popleft()
                try:
                    self.emit("data", chunk)
                except Exception as exc:
                    self.destroy(exc)
                    return
            if self._destroyed:
                return
            if self._flowing and not self._buffer:
                if self._pending_error is not None:
                    self.destroy(self._pending_error)
                    return
                if self._ended:
                    self._emit_end()
                    return

        self._maybe_read()

    def _emit_end(self) -> None:
        if self._end_emitted:
            return
        self._end_emitted = True
        logger.debug("%s ended", type(self).__name__)
        try:
            self.emit("end")
        except Exception as exc:
            self.destroy(exc)
            return
        if self._options.auto_destroy:
            self.destroy()

    # ── Flowing mode ──────────────────────────────────────────────────────────

    def on(self, event: str, handler: Callable[..., Any]) -> Callable[[], None]:
        unsubscribe = super().on(event, handler)
        if event == "data" and self._flowing is not False:
            self.resume()
        return unsubscribe

    def pause(self) -> "Readable":
        if self._flowing is not False:
            self._flowing = False
            self.emit("pause")
        return self

    def resume(self) -> "Readable":
        if not self._flowing:
            self._flowing = True
            self.emit("resume")
        self._schedule_tick()
        return self

    def pipe(self, dest: "Writable", *, end: bool = True) -> "Writable":
        """
        Forward every item to ``dest``, pausing while it asks for a drain.

        Calls ``dest.end()`` when this stream ends unless ``end`` is False.
        """
        awaiting_drain = False

        def on_data(chunk: Any) -> None:
            nonlocal awaiting_drain
            if not dest.write(chunk):
                awaiting_drain = True
                self.pause()

        def on_drain() -> None:
            nonlocal awaiting_drain
            if awaiting_drain:
                awaiting_drain = False
                self.resume()

        def on_end() -> None:
            if end:
                dest.end()

        def cleanup(*_: Any) -> None:
            for unsubscribe in unsubscribers:
                unsubscribe()
            if not self._destroyed:
                self.pause()

        unsubscribers = [
            dest.on("drain", on_drain),
            self.on("end", on_end),
            self.once("close", cleanup),
            dest.once("close", cleanup),
        ]
        dest.emit("pipe", self)
        unsubscribers.append(self.on("data", on_data))
        return dest

    # ── Paused mode ───────────────────────────────────────────────────────────

    def __aiter__(self) -> "Readable":
        self._error_observed = True
        return self

    async def __anext__(self) -> Any:
        while True:
            if self._buffer:
                chunk = self._buffer.popleft()
                self._schedule_tick()
                return chunk
            if self._errored is not None:
                raise self._errored
            if self._pending_error is not None:
                error = self._pending_error
                self.destroy(error)
                raise error
            if self._ended:
                self._emit_end()
                raise StopAsyncIteration
            if self._destroyed:
                raise PrematureCloseError()

            self._readable.clear()
            self._maybe_read()
            await self._readable.wait()

    async def aclose(self) -> None:
        """Destroy the stream and wait for it to close."""
        self.destroy()
        await self.wait_closed()

    # ── Destruction ───────────────────────────────────────────────────────────

    def _teardown(self) -> None:
        self._buffer.clear()
        self._readable.set()
