"""
Base stream lifecycle shared by readables and writables.

Handles destruction: the async ``_destroy()`` hook, the "error" and "close"
events, and waiting for close.
"""
from __future__ import annotations

import asyncio
import logging

from .utils.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class Stream(EventEmitter):
    """Common destroy/close machinery."""

    def __init__(self) -> None:
        super().__init__()
        self._destroyed = False
        self._closed = False
        self._errored: Exception | None = None
        # Set once something (an iterator, a waiter) is going to surface errors
        self._error_observed = False
        self._close_event = asyncio.Event()
        self._destroy_task: asyncio.Task | None = None

    # ── Properties ────────────────────────────────────────────────────────────

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def errored(self) -> Exception | None:
        return self._errored

    @property
    def completed(self) -> bool:
        """True once the stream reached its natural end ("end" or "finish")."""
        return False

    # ── Destruction ───────────────────────────────────────────────────────────

    def destroy(self, error: Exception | None = None) -> "Stream":
        """
        Tear the stream down.

        Idempotent. Runs ``_destroy()`` on the event loop, then emits "error"
        (when there is one) and "close".
        """
        if self._destroyed:
            return self
        self._destroyed = True
        if error is not None:
            self._errored = error
        self._teardown()
        self._destroy_task = asyncio.ensure_future(self._run_destroy(error))
        return self

    def _teardown(self) -> None:
        """Synchronous part of destroy(): drop buffers, wake waiters."""

    async def _destroy(self, error: Exception | None) -> None:
        """Release resources. Raising reports a cleanup failure."""

    async def _run_destroy(self, error: Exception | None) -> None:
        try:
            await self._destroy(error)
        except Exception as exc:
            if error is None:
                error = exc
                self._errored = exc
            else:
                logger.warning(
                    "%s cleanup failed after error %r", type(self).__name__, error, exc_info=exc
                )

        if error is not None:
            self._emit_error(error)
        self._closed = True
        self._close_event.set()
        self.emit("close")

    def _emit_error(self, error: Exception) -> None:
        if self.listener_count("error") == 0 and not self._error_observed:
            logger.error("Unhandled error in %s", type(self).__name__, exc_info=error)
        self.emit("error", error)

    async def wait_closed(self) -> None:
        """Wait until "close" has been emitted."""
        await self._close_event.wait()
