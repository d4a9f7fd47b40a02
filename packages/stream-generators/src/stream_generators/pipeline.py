"""
Awaitable completion helpers.

finished() turns a stream's "error"/"close" events into a coroutine;
pipeline() pipes a readable into a writable and tears both down on failure.
"""
from __future__ import annotations

import asyncio

from .errors import PrematureCloseError
from .readable import Readable
from .stream import Stream
from .writable import Writable


async def finished(stream: Stream) -> None:
    """
    Wait for ``stream`` to close.

    Raises the stream's error if it failed, or PrematureCloseError if it
    closed before ending/finishing.
    """
    if not stream.closed:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def on_error(error: Exception) -> None:
            if not future.done():
                future.set_exception(error)

        def on_close() -> None:
            if not future.done():
                future.set_result(None)

        unsubscribers = [stream.once("error", on_error), stream.once("close", on_close)]
        try:
            await future
        finally:
            for unsubscribe in unsubscribers:
                unsubscribe()

    if stream.errored is not None:
        raise stream.errored
    if not stream.completed:
        raise PrematureCloseError()


async def pipeline(source: Readable, dest: Writable) -> None:
    """
    Pipe ``source`` into ``dest`` and wait until ``dest`` has finished.

    A source error destroys ``dest`` with that error; a destination failure
    destroys ``source`` (closing whatever it wraps). The first error is
    raised.
    """
    unsubscribers = [
        source.once("error", dest.destroy),
        dest.once("error", lambda _error: source.destroy()),
    ]
    source.pipe(dest)
    try:
        await finished(dest)
    except Exception:
        source.destroy()
        raise
    except asyncio.CancelledError:
        source.destroy()
        dest.destroy()
        raise
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()
    await source.wait_closed()
