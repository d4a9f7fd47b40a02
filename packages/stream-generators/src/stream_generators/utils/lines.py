"""
Line-oriented async generators for text sources.

read_chunks() reads a file in fixed-size text chunks; chunks_to_lines()
re-splits any chunk source on newlines; number_lines() prefixes a counter.
They compose with each other and with readable streams.
"""
from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from os import PathLike

import aiofiles

DEFAULT_CHUNK_SIZE = 256


async def read_chunks(
    path: str | PathLike[str],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
) -> AsyncIterator[str]:
    """Yield the text of ``path`` in chunks of at most ``chunk_size`` characters."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    async with aiofiles.open(path, "r", encoding=encoding) as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                return
            yield chunk


async def chunks_to_lines(chunks: AsyncIterable[str]) -> AsyncIterator[str]:
    """
    Re-split text chunks into lines.

    Each line keeps its trailing newline. A final line without one is yielded
    only if it is non-empty.
    """
    previous = ""
    async for chunk in chunks:
        previous += chunk
        while (eol := previous.find("\n")) >= 0:
            yield previous[: eol + 1]
            previous = previous[eol + 1 :]

    if previous:
        yield previous


async def number_lines(lines: AsyncIterable[str], start: int = 1) -> AsyncIterator[str]:
    counter = start
    async for line in lines:
        yield f"{counter}: {line}"
        counter += 1
