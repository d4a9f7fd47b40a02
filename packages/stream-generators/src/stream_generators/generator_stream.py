"""
Async generator to readable stream adapter.

Wraps any async iterable so it can be consumed like a readable stream: each
demand signal from the stream pulls exactly one item, the producer's
exhaustion ends the stream, and a producer exception becomes the stream's
error.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from .errors import InvalidArgumentError, SourceCancelledError
from .readable import EOF, Readable
from .types import GeneratorStreamOptions, Source

logger = logging.getLogger(__name__)


def is_async_iterable(value: Any) -> bool:
    """True if ``value`` can be consumed with ``async for``."""
    return isinstance(value, AsyncIterable)


class GeneratorStream(Readable):
    """
    Readable stream backed by an async iterable.

    At most one ``__anext__()`` call is outstanding at any time. Items are
    pushed untouched, in the order the source yields them.

    Construction raises InvalidArgumentError when ``source`` is not an async
    iterable or its ``__aiter__()`` does not return an async iterator. Any
    other exception raised by ``__aiter__()`` is the source's own failure and
    propagates unchanged.
    """

    def __init__(self, source: Source, options: GeneratorStreamOptions | None = None) -> None:
        if not is_async_iterable(source):
            raise InvalidArgumentError(
                f"First argument must be an async iterable, got {type(source).__name__}"
            )
        try:
            iterator = aiter(source)
        except TypeError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        options = options or GeneratorStreamOptions()
        super().__init__(options)
        self._close_source = options.close_source
        self._iterator: AsyncIterator[Any] = iterator
        self._pull_task: asyncio.Task | None = None
        self._source_done = False
        self._cancelling = False

    @property
    def pulling(self) -> bool:
        """True while a pull from the source is in flight."""
        return self._pull_task is not None

    def _read(self, size: int) -> None:
        if self._pull_task is not None:
            logger.debug("Pull already in flight; ignoring demand")
            return
        if self._source_done or self._destroyed:
            return
        self._pull_task = asyncio.ensure_future(self._pull())

    def _pull_cancelled(self) -> bool:
        """True if the pull task itself was asked to cancel."""
        if self._cancelling or self._destroyed:
            return True
        task = asyncio.current_task()
        cancelling = getattr(task, "cancelling", None)
        return cancelling is not None and cancelling() > 0

    async def _pull(self) -> None:
        try:
            value = await anext(self._iterator)
        except StopAsyncIteration:
            self._source_done = True
            logger.debug("Source exhausted")
            if not self._destroyed:
                self.push(EOF)
        except asyncio.CancelledError as exc:
            self._source_done = True
            if self._pull_cancelled():
                raise
            logger.debug("Source raised CancelledError on its own")
            error = SourceCancelledError()
            error.__cause__ = exc
            self.fail(error)
        except Exception as exc:
            self._source_done = True
            if self._destroyed:
                logger.warning("Source failed after stream was destroyed", exc_info=exc)
            else:
                logger.debug("Source failed: %r", exc)
                self.fail(exc)
        else:
            if self._destroyed:
                logger.debug("Dropping item resolved after destroy")
            else:
                self.push(value)
        finally:
            self._pull_task = None

    async def _destroy(self, error: Exception | None) -> None:
        task = self._pull_task
        if task is not None and not task.done():
            # Throws CancelledError into the source at its suspension point
            self._cancelling = True
            task.cancel()
            await asyncio.wait([task])

        if self._close_source:
            aclose = getattr(self._iterator, "aclose", None)
            if aclose is not None:
                logger.debug("Closing source")
                await aclose()


def streamify(source: Source, options: GeneratorStreamOptions | None = None) -> GeneratorStream:
    """Wrap ``source`` in a GeneratorStream."""
    return GeneratorStream(source, options)
